from sqlalchemy import Column, DateTime, String

from shared.config.database import Base, new_uuid, utcnow


class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(String(36), unique=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
