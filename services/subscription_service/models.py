from sqlalchemy import JSON, Boolean, Column, DateTime, Numeric, String, Text

from shared.config.database import Base, new_uuid, utcnow


class SubscriptionPlan(Base):
    __tablename__ = "subscription_plans"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(255), nullable=False)
    tier = Column(String(16), nullable=False)  # basic, premium, royal
    price_monthly = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=False, default="")
    features = Column(JSON, nullable=False, default=list)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class UserSubscription(Base):
    __tablename__ = "user_subscriptions"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    plan_id = Column(String(36), nullable=False)
    status = Column(String(16), nullable=False, default="active")  # active, canceled
    current_period_start = Column(DateTime(timezone=True), nullable=False)
    current_period_end = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
