import enum
from sqlalchemy import Column, String, Text, Numeric, Boolean, DateTime, Enum as SAEnum, func
from sqlalchemy.orm import relationship
from ..db.base import Base
from ._defaults import new_id


class SubscriptionPlanEnum(str, enum.Enum):
    free = "free"
    basic = "basic"
    premium = "premium"
    enterprise = "enterprise"


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(128), nullable=False)
    slug = Column(String(128), nullable=False, unique=True, index=True)  # public menu URL key
    owner_name = Column(String(128), nullable=True)
    owner_email = Column(String(255), nullable=True)
    phone_number = Column(String(32), nullable=True)  # WhatsApp destination
    address = Column(Text, nullable=True)
    branch_name = Column(String(128), nullable=True)
    description = Column(Text, nullable=True)

    # branding
    logo_url = Column(String(512), nullable=True)
    primary_color = Column(String(16), nullable=True)
    secondary_color = Column(String(16), nullable=True)
    accent_color = Column(String(16), nullable=True)

    currency = Column(String(8), nullable=False, default="SYP")
    delivery_fee = Column(Numeric(10, 2), nullable=False, default=0)
    subscription_plan = Column(
        SAEnum(SubscriptionPlanEnum, name="subscription_plan"),
        nullable=False,
        default=SubscriptionPlanEnum.free,
    )
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    categories = relationship("MenuCategory", back_populates="tenant", cascade="all, delete-orphan")
    menu_items = relationship("MenuItem", back_populates="tenant", cascade="all, delete-orphan")
    tables = relationship("RestaurantTable", back_populates="tenant", cascade="all, delete-orphan")
    orders = relationship("PosOrder", back_populates="tenant")
