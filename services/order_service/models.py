from sqlalchemy import JSON, Column, DateTime, Numeric, String, Text

from shared.config.database import Base, new_uuid, utcnow


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    # Idempotency key of the checkout that produced this row
    checkout_key = Column(String(36), unique=True, nullable=True)
    items = Column(JSON, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)  # subtotal
    delivery_fee = Column(Numeric(10, 2), nullable=False, default=0)
    tax = Column(Numeric(10, 2), nullable=False, default=0)
    tip = Column(Numeric(10, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    promo_code = Column(String(32), nullable=True)
    total_amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="INR")
    delivery_method = Column(String(16), nullable=False, default="standard")
    delivery_address = Column(JSON, nullable=False)
    special_instructions = Column(Text, nullable=True)
    payment_method = Column(String(16), nullable=False, default="card")
    status = Column(String(16), nullable=False, default="pending")  # pending, processing, completed, cancelled
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
