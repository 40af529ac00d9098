from sqlalchemy import Column, DateTime, String

from shared.config.database import Base, new_uuid, utcnow


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(String(36), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=False, default="")
    phone = Column(String(32), nullable=False, default="")
    address = Column(String(1024), nullable=False, default="")
    membership_tier = Column(String(16), nullable=False, default="basic")
    avatar_url = Column(String(1024), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
