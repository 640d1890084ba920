import enum
from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, Enum as SAEnum, func
from sqlalchemy.orm import relationship
from ..db.base import Base
from ._defaults import new_id, utcnow


class ShiftStatusEnum(str, enum.Enum):
    open = "open"
    closed = "closed"


class Shift(Base):
    __tablename__ = "shifts"

    id = Column(String(36), primary_key=True, default=new_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    staff_user_id = Column(String(36), ForeignKey("staff_users.id"), nullable=False)
    status = Column(SAEnum(ShiftStatusEnum, name="shift_status"), nullable=False, default=ShiftStatusEnum.open)
    shift_start = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    shift_end = Column(DateTime(timezone=True), nullable=True)

    opening_cash = Column(Numeric(10, 2), nullable=False, default=0)
    closing_cash = Column(Numeric(10, 2), nullable=True)

    # filled in when the shift is closed
    total_sales = Column(Numeric(10, 2), nullable=False, default=0)
    total_orders = Column(Integer, nullable=False, default=0)
    cash_payments = Column(Numeric(10, 2), nullable=False, default=0)
    card_payments = Column(Numeric(10, 2), nullable=False, default=0)
    digital_payments = Column(Numeric(10, 2), nullable=False, default=0)
    discounts_given = Column(Numeric(10, 2), nullable=False, default=0)

    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    staff_user = relationship("StaffUser", back_populates="shifts")
