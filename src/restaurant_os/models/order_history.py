from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, JSON, func
from ..db.base import Base
from ._defaults import new_id, utcnow


class OrderHistory(Base):
    """Analytics log: one row per submitted cart, whether or not the POS insert succeeded."""

    __tablename__ = "order_history"

    id = Column(String(36), primary_key=True, default=new_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    cart_id = Column(String(64), nullable=False)
    cart_hash = Column(String(32), nullable=False)
    customer_name = Column(String(128), nullable=True)
    customer_phone = Column(String(32), nullable=True)
    order_type = Column(String(32), nullable=False)
    order_mode = Column(String(32), nullable=False)
    items_count = Column(Integer, nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)
    delivery_fee = Column(Numeric(10, 2), nullable=False, default=0)
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)
    order_data = Column(JSON, nullable=True)
    customer_notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
