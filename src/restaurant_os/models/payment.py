import enum
from sqlalchemy import Column, String, Text, Numeric, DateTime, ForeignKey, Enum as SAEnum, func
from sqlalchemy.orm import relationship
from ..db.base import Base
from ._defaults import new_id, utcnow


class PaymentMethodEnum(str, enum.Enum):
    cash = "cash"
    card = "card"
    digital = "digital"


class PaymentStatusEnum(str, enum.Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"
    refunded = "refunded"


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=new_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    order_id = Column(String(36), ForeignKey("pos_orders.id"), nullable=False, index=True)
    payment_method = Column(SAEnum(PaymentMethodEnum, name="payment_method"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    received_amount = Column(Numeric(10, 2), nullable=True)
    change_amount = Column(Numeric(10, 2), nullable=False, default=0)
    processed_by = Column(String(64), nullable=True)
    payment_status = Column(
        SAEnum(PaymentStatusEnum, name="payment_status"),
        nullable=False,
        default=PaymentStatusEnum.completed,
    )
    transaction_reference = Column(String(128), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)

    order = relationship("PosOrder", back_populates="payments")
