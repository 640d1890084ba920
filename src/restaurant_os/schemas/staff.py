from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from restaurant_os.models.staff import StaffRoleEnum

PIN_CODE = r"^\d{4,6}$"


class StaffCreate(BaseModel):
    staff_name: str = Field(..., min_length=1, max_length=128)
    role: StaffRoleEnum
    pin_code: Optional[str] = Field(None, pattern=PIN_CODE)
    permissions: dict[str, bool] = {}
    is_active: bool = True


class StaffUpdate(BaseModel):
    staff_name: Optional[str] = Field(None, min_length=1, max_length=128)
    role: Optional[StaffRoleEnum] = None
    pin_code: Optional[str] = Field(None, pattern=PIN_CODE)
    permissions: Optional[dict[str, bool]] = None
    is_active: Optional[bool] = None

    class Config:
        extra = "forbid"


class StaffRead(BaseModel):
    id: str
    staff_name: str
    role: StaffRoleEnum
    permissions: dict[str, bool] = {}
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
