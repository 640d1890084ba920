import enum
from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, JSON, Enum as SAEnum, func
from sqlalchemy.orm import relationship
from ..db.base import Base
from ._defaults import new_id, utcnow


class OrderStatusEnum(str, enum.Enum):
    pending_approval = "pending_approval"
    new = "new"
    preparing = "preparing"
    ready = "ready"
    completed = "completed"
    cancelled = "cancelled"


class OrderTypeEnum(str, enum.Enum):
    dine_in = "dine_in"
    takeaway = "takeaway"
    delivery = "delivery"
    table = "table"
    whatsapp = "whatsapp"


class PosOrder(Base):
    __tablename__ = "pos_orders"

    id = Column(String(36), primary_key=True, default=new_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    order_number = Column(String(64), nullable=False, unique=True)
    status = Column(
        SAEnum(OrderStatusEnum, name="pos_order_status"),
        nullable=False,
        default=OrderStatusEnum.pending_approval,
        index=True,
    )
    order_type = Column(SAEnum(OrderTypeEnum, name="pos_order_type"), nullable=False)
    table_id = Column(String(36), ForeignKey("restaurant_tables.id", ondelete="SET NULL"), nullable=True)

    # snapshots taken when the order is placed
    customer_info = Column(JSON, nullable=True)
    items = Column(JSON, nullable=False, default=list)
    subtotal = Column(Numeric(10, 2), nullable=False, default=0)
    delivery_fee = Column(Numeric(10, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(64), nullable=True)
    notes = Column(Text, nullable=True)

    approved_by = Column(String(64), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    preparation_start_time = Column(DateTime(timezone=True), nullable=True)
    ready_time = Column(DateTime(timezone=True), nullable=True)
    completion_time = Column(DateTime(timezone=True), nullable=True)

    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)

    tenant = relationship("Tenant", back_populates="orders")
    table = relationship("RestaurantTable", back_populates="orders")
    payments = relationship("Payment", back_populates="order")


class OrderModeEnum(str, enum.Enum):
    """How the customer receives the order; chosen in the cart."""

    dine_in = "dine_in"
    takeaway = "takeaway"
    delivery = "delivery"
