from datetime import date, time
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.walk_request import WalkRequest, RequestStatus


class WalkRequestRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, request_id: str) -> Optional[WalkRequest]:
        return self.db.get(WalkRequest, request_id)

    def create(
        self,
        client_id: str,
        walker_id: str,
        requested_date: date,
        requested_time: time,
        duration_minutes: int,
        number_of_dogs: int,
        special_notes: Optional[str],
    ) -> WalkRequest:
        row = WalkRequest(
            client_id=client_id,
            walker_id=walker_id,
            requested_date=requested_date,
            requested_time=requested_time,
            duration_minutes=duration_minutes,
            number_of_dogs=number_of_dogs,
            special_notes=special_notes,
            status=RequestStatus.PENDING,
        )
        self.db.add(row)
        self.db.flush()
        return row

    def list_for_client(self, client_id: str) -> List[WalkRequest]:
        return (
            self.db.query(WalkRequest)
            .filter(WalkRequest.client_id == client_id)
            .order_by(WalkRequest.created_at.desc())
            .all()
        )

    def list_for_walker(self, walker_id: str) -> List[WalkRequest]:
        return (
            self.db.query(WalkRequest)
            .filter(WalkRequest.walker_id == walker_id)
            .order_by(WalkRequest.created_at.desc())
            .all()
        )

    def set_status(self, row: WalkRequest, status: RequestStatus, response_notes: Optional[str] = None) -> WalkRequest:
        row.status = status
        if response_notes is not None:
            row.response_notes = response_notes
        self.db.flush()
        return row
