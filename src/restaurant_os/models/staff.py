import enum
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, JSON, Enum as SAEnum, func
from sqlalchemy.orm import relationship
from ..db.base import Base
from ._defaults import new_id


class StaffRoleEnum(str, enum.Enum):
    cashier = "cashier"
    waiter = "waiter"
    kitchen = "kitchen"
    manager = "manager"


class StaffUser(Base):
    __tablename__ = "staff_users"

    id = Column(String(36), primary_key=True, default=new_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    staff_name = Column(String(128), nullable=False)
    role = Column(SAEnum(StaffRoleEnum, name="staff_role"), nullable=False)
    pin_code = Column(String(8), nullable=True)  # POS quick login, never returned by the API
    permissions = Column(JSON, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    shifts = relationship("Shift", back_populates="staff_user")
