from datetime import datetime
from typing import Iterable, List, Optional, Set

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.admin_location import AdminLocation
from app.models.location import Location


class LocationRepository:
    def __init__(self, db: Session):
        self.db = db

    # -------------------------------
    # Walker live position
    # -------------------------------
    def get_admin_location(self, admin_id: str) -> Optional[AdminLocation]:
        return (
            self.db.query(AdminLocation)
            .filter(AdminLocation.admin_id == admin_id)
            .first()
        )

    def get_active_admin_location(self, admin_id: str) -> Optional[AdminLocation]:
        return (
            self.db.query(AdminLocation)
            .filter(
                AdminLocation.admin_id == admin_id,
                AdminLocation.is_active.is_(True),
            )
            .order_by(AdminLocation.timestamp.desc())
            .first()
        )

    def upsert_admin_location(
        self,
        admin_id: str,
        latitude: float,
        longitude: float,
        timestamp: Optional[datetime] = None,
    ) -> AdminLocation:
        """Single row per walker: update it in place, insert it the first time."""
        timestamp = timestamp or datetime.utcnow()

        row = self.get_admin_location(admin_id)
        if row is None:
            try:
                # savepoint: a concurrent first insert for the same walker
                # hits the unique key and we fall through to the update
                with self.db.begin_nested():
                    row = AdminLocation(
                        admin_id=admin_id,
                        latitude=latitude,
                        longitude=longitude,
                        is_active=True,
                        timestamp=timestamp,
                    )
                    self.db.add(row)
                return row
            except IntegrityError:
                row = self.get_admin_location(admin_id)

        row.latitude = latitude
        row.longitude = longitude
        row.is_active = True
        row.timestamp = timestamp
        self.db.flush()
        return row

    def deactivate_admin_locations(self, admin_id: str) -> int:
        updated = (
            self.db.query(AdminLocation)
            .filter(
                AdminLocation.admin_id == admin_id,
                AdminLocation.is_active.is_(True),
            )
            .update({AdminLocation.is_active: False}, synchronize_session=False)
        )
        self.db.flush()
        return updated

    def count_active_admin_locations(self, admin_id: str) -> int:
        return (
            self.db.query(AdminLocation)
            .filter(
                AdminLocation.admin_id == admin_id,
                AdminLocation.is_active.is_(True),
            )
            .count()
        )

    def active_admin_ids(self, admin_ids: Iterable[str]) -> Set[str]:
        ids = list(set(admin_ids))
        if not ids:
            return set()
        rows = (
            self.db.query(AdminLocation.admin_id)
            .filter(
                AdminLocation.admin_id.in_(ids),
                AdminLocation.is_active.is_(True),
            )
            .all()
        )
        return {r[0] for r in rows}

    # -------------------------------
    # Per-walk track (append only)
    # -------------------------------
    def append_location(
        self,
        walk_id: str,
        latitude: float,
        longitude: float,
        timestamp: Optional[datetime] = None,
    ) -> Location:
        row = Location(
            walk_id=walk_id,
            latitude=latitude,
            longitude=longitude,
            timestamp=timestamp or datetime.utcnow(),
        )
        self.db.add(row)
        self.db.flush()
        return row

    def list_locations(self, walk_id: str) -> List[Location]:
        return (
            self.db.query(Location)
            .filter(Location.walk_id == walk_id)
            .order_by(Location.timestamp.desc(), Location.created_at.desc())
            .all()
        )
