from pydantic import BaseModel, Field, computed_field
from typing import Optional
from decimal import Decimal

from restaurant_os.models.order import OrderStatusEnum


class TableCreate(BaseModel):
    table_number: str = Field(..., min_length=1, max_length=32)
    capacity: int = Field(4, ge=1)
    location_area: Optional[str] = None


class TableUpdate(BaseModel):
    table_number: Optional[str] = Field(None, min_length=1, max_length=32)
    capacity: Optional[int] = Field(None, ge=1)
    location_area: Optional[str] = None
    is_active: Optional[bool] = None

    class Config:
        extra = "forbid"


class TableRead(BaseModel):
    id: str
    table_number: str
    capacity: int
    location_area: Optional[str] = None
    qr_code_url: Optional[str] = None
    is_active: bool

    class Config:
        from_attributes = True


class CurrentOrder(BaseModel):
    id: str
    order_number: str
    status: OrderStatusEnum
    total_amount: Decimal

    class Config:
        from_attributes = True


class TableWithOrder(TableRead):
    current_order: Optional[CurrentOrder] = None

    @computed_field
    @property
    def is_occupied(self) -> bool:
        return self.current_order is not None
