from typing import Optional

from sqlalchemy.orm import Session

from app.models.profile import Profile
from app.models.user_role import UserRole, AppRole
from app.models.walker_profile import WalkerProfile


class AuthRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, user_id: str) -> Optional[Profile]:
        return self.db.get(Profile, user_id)

    def get_role(self, user_id: str) -> AppRole:
        row = (
            self.db.query(UserRole)
            .filter(UserRole.user_id == user_id)
            .first()
        )
        # no role row means a plain client
        return row.role if row else AppRole.USER

    def create_profile(self, user_id: str, name: str, email: str, phone: Optional[str]) -> Profile:
        profile = Profile(
            id=user_id,
            name=name,
            email=email,
            phone=phone,
            completed_walks_count=0,
        )
        self.db.add(profile)
        self.db.flush()
        return profile

    def create_role(self, user_id: str, role: AppRole) -> UserRole:
        row = UserRole(user_id=user_id, role=role)
        self.db.add(row)
        self.db.flush()
        return row

    def create_walker_placeholder(self, user_id: str) -> WalkerProfile:
        walker_profile = WalkerProfile(
            user_id=user_id,
            is_available=False,
            service_radius=10,
            specialties=[],
        )
        self.db.add(walker_profile)
        self.db.flush()
        return walker_profile
