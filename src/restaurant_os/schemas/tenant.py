from pydantic import BaseModel, EmailStr, Field, condecimal
from typing import Optional
from datetime import datetime
from decimal import Decimal

from restaurant_os.models.tenant import SubscriptionPlanEnum

HEX_COLOR = r"^#[0-9a-fA-F]{6}$"


class Branding(BaseModel):
    logo_url: Optional[str] = None
    primary_color: Optional[str] = Field(None, pattern=HEX_COLOR)
    secondary_color: Optional[str] = Field(None, pattern=HEX_COLOR)
    accent_color: Optional[str] = Field(None, pattern=HEX_COLOR)
    description: Optional[str] = None

    class Config:
        from_attributes = True


class BrandingUpdate(Branding):
    class Config:
        extra = "forbid"


class TenantCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    owner_name: Optional[str] = None
    owner_email: Optional[EmailStr] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    subscription_plan: SubscriptionPlanEnum = SubscriptionPlanEnum.free
    currency: Optional[str] = None
    delivery_fee: condecimal(ge=0, max_digits=10, decimal_places=2) = Decimal("0")


class TenantUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    phone_number: Optional[str] = None
    address: Optional[str] = None
    branch_name: Optional[str] = None
    currency: Optional[str] = None
    delivery_fee: Optional[condecimal(ge=0, max_digits=10, decimal_places=2)] = None
    subscription_plan: Optional[SubscriptionPlanEnum] = None
    is_active: Optional[bool] = None

    class Config:
        extra = "forbid"


class TenantRead(Branding):
    id: str
    name: str
    slug: str
    owner_name: Optional[str] = None
    owner_email: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    branch_name: Optional[str] = None
    currency: str
    delivery_fee: Decimal
    subscription_plan: SubscriptionPlanEnum
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class PublicTenantRead(Branding):
    id: str
    name: str
    slug: str
    branch_name: Optional[str] = None
    address: Optional[str] = None
    currency: str
    delivery_fee: Decimal

    class Config:
        from_attributes = True
