from sqlalchemy import Boolean, Column, DateTime, Numeric, String, Text

from shared.config.database import Base, new_uuid, utcnow


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String(32), nullable=False, index=True)
    image_url = Column(String(1024), nullable=True)
    # Availability flag only, no stock count is tracked
    in_stock = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
