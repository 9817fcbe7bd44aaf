from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime
from app.models.base import Base


class Profile(Base):
    __tablename__ = "profiles"

    # Firebase uid of the account
    id = Column(String(128), primary_key=True)

    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20))
    avatar_url = Column(String(500))
    fcm_token = Column(String(255))

    completed_walks_count = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
