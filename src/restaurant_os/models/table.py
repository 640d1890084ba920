from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..db.base import Base
from ._defaults import new_id


class RestaurantTable(Base):
    __tablename__ = "restaurant_tables"

    id = Column(String(36), primary_key=True, default=new_id)
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    table_number = Column(String(32), nullable=False)
    capacity = Column(Integer, nullable=False, default=4)
    location_area = Column(String(64), nullable=True)
    qr_code_url = Column(String(512), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    tenant = relationship("Tenant", back_populates="tables")
    orders = relationship("PosOrder", back_populates="table")
