from datetime import datetime

from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, JSON, ForeignKey
from app.models.base import Base, new_uuid


class SubscriptionPlan(Base):
    __tablename__ = "subscription_plans"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(50), nullable=False, unique=True)
    display_name = Column(String(100), nullable=False)
    max_clients = Column(Integer, nullable=False)
    features = Column(JSON, default=list)
    price_monthly = Column(Float, default=0)


class WalkerSubscription(Base):
    __tablename__ = "walker_subscriptions"

    id = Column(String(36), primary_key=True, default=new_uuid)
    walker_id = Column(String(128), ForeignKey("profiles.id"), nullable=False, index=True)
    plan_id = Column(String(36), ForeignKey("subscription_plans.id"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    started_at = Column(DateTime, default=datetime.utcnow)
