from typing import Iterable, List, Optional, Dict

from sqlalchemy.orm import Session

from app.models.profile import Profile


class UserRepository:

    def __init__(self, db: Session):
        self.db = db

    # -------------------------------------------------
    # Profile lookups
    # -------------------------------------------------
    def get_profile(self, user_id: str) -> Optional[Profile]:
        return self.db.get(Profile, user_id)

    def get_profiles_by_ids(self, user_ids: Iterable[str]) -> Dict[str, Profile]:
        ids = list(set(user_ids))
        if not ids:
            return {}
        rows = (
            self.db.query(Profile)
            .filter(Profile.id.in_(ids))
            .all()
        )
        return {p.id: p for p in rows}

    def update_profile(self, profile: Profile, name=None, phone=None, avatar_url=None) -> Profile:
        if name is not None:
            profile.name = name
        if phone is not None:
            profile.phone = phone
        if avatar_url is not None:
            profile.avatar_url = avatar_url

        self.db.flush()
        return profile

    def increment_completed_walks(self, user_id: str) -> None:
        profile = self.get_profile(user_id)
        if profile is not None:
            profile.completed_walks_count = (profile.completed_walks_count or 0) + 1
            self.db.flush()

    # -------------------------------------------------
    # FCM token management
    # -------------------------------------------------
    def set_fcm_token(self, profile: Profile, fcm_token: str) -> None:
        profile.fcm_token = fcm_token
        self.db.flush()

    def get_fcm_tokens_for_users(self, user_ids: Iterable[str]) -> List[str]:
        return [
            p.fcm_token
            for p in self.get_profiles_by_ids(user_ids).values()
            if p.fcm_token
        ]

    def remove_fcm_tokens(self, tokens: Iterable[str]) -> int:
        tokens = [t for t in tokens if t]
        if not tokens:
            return 0
        updated = (
            self.db.query(Profile)
            .filter(Profile.fcm_token.in_(tokens))
            .update({Profile.fcm_token: None}, synchronize_session=False)
        )
        self.db.commit()
        return updated
