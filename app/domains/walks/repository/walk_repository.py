from datetime import datetime
from typing import List, Optional, Iterable

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.walk import Walk, WalkStatus


class WalkRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, walk_id: str) -> Optional[Walk]:
        return self.db.get(Walk, walk_id)

    def create(self, client_id: str, dog_name: str, notes: Optional[str] = None) -> Walk:
        walk = Walk(
            client_id=client_id,
            dog_name=dog_name,
            notes=notes,
            status=WalkStatus.PENDING,
        )
        self.db.add(walk)
        self.db.flush()
        return walk

    def list_for_user(self, user_id: str) -> List[Walk]:
        return (
            self.db.query(Walk)
            .filter(or_(Walk.client_id == user_id, Walk.walker_id == user_id))
            .order_by(Walk.created_at.desc())
            .all()
        )

    def start(self, walk: Walk, walker_id: str, now: Optional[datetime] = None) -> Walk:
        walk.walker_id = walker_id
        walk.status = WalkStatus.ACTIVE
        walk.start_time = now or datetime.utcnow()
        self.db.flush()
        return walk

    def set_status(self, walk: Walk, status: WalkStatus, now: Optional[datetime] = None) -> Walk:
        walk.status = status
        if status in (WalkStatus.COMPLETED, WalkStatus.CANCELLED):
            walk.end_time = now or datetime.utcnow()
        self.db.flush()
        return walk

    def count_for_walker(
        self,
        walker_id: str,
        statuses: Optional[Iterable[WalkStatus]] = None,
        created_from: Optional[datetime] = None,
        created_until: Optional[datetime] = None,
    ) -> int:
        query = self.db.query(Walk).filter(Walk.walker_id == walker_id)
        if statuses is not None:
            query = query.filter(Walk.status.in_(list(statuses)))
        if created_from is not None:
            query = query.filter(Walk.created_at >= created_from)
        if created_until is not None:
            query = query.filter(Walk.created_at < created_until)
        return query.count()
