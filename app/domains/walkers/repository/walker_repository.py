from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.subscription import SubscriptionPlan, WalkerSubscription
from app.models.walker_profile import WalkerProfile


class WalkerRepository:
    def __init__(self, db: Session):
        self.db = db

    # -------------------------------
    # Service listing
    # -------------------------------
    def get_profile(self, user_id: str) -> Optional[WalkerProfile]:
        return (
            self.db.query(WalkerProfile)
            .filter(WalkerProfile.user_id == user_id)
            .first()
        )

    def upsert_profile(self, user_id: str, **fields) -> WalkerProfile:
        row = self.get_profile(user_id)
        if row is None:
            row = WalkerProfile(user_id=user_id)
            self.db.add(row)

        for key, value in fields.items():
            setattr(row, key, value)

        self.db.flush()
        return row

    def list_available(self) -> List[WalkerProfile]:
        return (
            self.db.query(WalkerProfile)
            .filter(WalkerProfile.is_available.is_(True))
            .order_by(WalkerProfile.created_at.desc())
            .all()
        )

    # -------------------------------
    # Subscription
    # -------------------------------
    def get_active_plan(self, walker_id: str) -> Optional[SubscriptionPlan]:
        return (
            self.db.query(SubscriptionPlan)
            .join(WalkerSubscription, WalkerSubscription.plan_id == SubscriptionPlan.id)
            .filter(
                WalkerSubscription.walker_id == walker_id,
                WalkerSubscription.is_active.is_(True),
            )
            .order_by(WalkerSubscription.started_at.desc())
            .first()
        )
