from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.models.affiliation import Affiliation


class AffiliationRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str, admin_id: str) -> Optional[Affiliation]:
        return (
            self.db.query(Affiliation)
            .filter(
                Affiliation.user_id == user_id,
                Affiliation.admin_id == admin_id,
            )
            .first()
        )

    def is_affiliated(self, user_id: str, admin_id: str) -> bool:
        aff = self.get(user_id, admin_id)
        return aff is not None and bool(aff.is_active)

    def create(self, user_id: str, admin_id: str) -> Affiliation:
        aff = Affiliation(
            user_id=user_id,
            admin_id=admin_id,
            is_active=True,
            affiliated_at=datetime.utcnow(),
        )
        self.db.add(aff)
        self.db.flush()
        return aff

    def ensure_active(self, user_id: str, admin_id: str) -> Tuple[Affiliation, bool]:
        """
        Make sure an active link exists. Reactivates a soft-deleted one.

        Returns:
            (affiliation, changed): changed is False when it was already active
        """
        aff = self.get(user_id, admin_id)
        if aff is None:
            return self.create(user_id, admin_id), True

        if not aff.is_active:
            aff.is_active = True
            aff.affiliated_at = datetime.utcnow()
            self.db.flush()
            return aff, True

        return aff, False

    def deactivate(self, aff: Affiliation) -> Affiliation:
        aff.is_active = False
        self.db.flush()
        return aff

    def list_for_walker(self, admin_id: str) -> List[Affiliation]:
        return (
            self.db.query(Affiliation)
            .filter(
                Affiliation.admin_id == admin_id,
                Affiliation.is_active.is_(True),
            )
            .order_by(Affiliation.affiliated_at.desc())
            .all()
        )

    def list_for_client(self, user_id: str) -> List[Affiliation]:
        return (
            self.db.query(Affiliation)
            .filter(Affiliation.user_id == user_id)
            .order_by(Affiliation.affiliated_at.desc())
            .all()
        )

    def active_client_ids(self, admin_id: str) -> List[str]:
        return [a.user_id for a in self.list_for_walker(admin_id)]

    def count_active(self, admin_id: str) -> int:
        return (
            self.db.query(Affiliation)
            .filter(
                Affiliation.admin_id == admin_id,
                Affiliation.is_active.is_(True),
            )
            .count()
        )
