from pydantic import BaseModel, Field, conint
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from restaurant_os.models.order import OrderModeEnum, OrderStatusEnum, OrderTypeEnum
from restaurant_os.services.order_status import OrderActionEnum


class CustomerInfo(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    table_number: Optional[str] = None
    delivery_address: Optional[str] = None


class OrderLineRead(BaseModel):
    item_id: str
    name: str
    price: Decimal
    quantity: int
    notes: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class OrderRead(BaseModel):
    id: str
    tenant_id: str
    order_number: str
    status: OrderStatusEnum
    order_type: OrderTypeEnum
    table_id: Optional[str] = None
    customer_info: Optional[CustomerInfo] = None
    items: List[OrderLineRead] = []
    subtotal: Decimal
    delivery_fee: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    preparation_start_time: Optional[datetime] = None
    ready_time: Optional[datetime] = None
    completion_time: Optional[datetime] = None
    version: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CartLineIn(BaseModel):
    item_id: str
    quantity: conint(ge=1) = 1
    notes: Optional[str] = None


class OrderPlace(BaseModel):
    """Public checkout payload. Names and prices are snapshotted from the menu, not trusted from the client."""

    items: List[CartLineIn]
    mode: OrderModeEnum = OrderModeEnum.takeaway
    customer: Optional[CustomerInfo] = None
    notes: Optional[str] = None
    table_id: Optional[str] = None
    payment_method: Optional[str] = None
    preferred_time: Optional[str] = Field(None, max_length=64)


class ChatLinksRead(BaseModel):
    app_url: str
    web_url: str


class OrderPlaced(BaseModel):
    order: Optional[OrderRead] = None
    order_number: str
    total_amount: Decimal
    message: str
    whatsapp: ChatLinksRead
    persisted: bool


class OrderTransition(BaseModel):
    action: OrderActionEnum
    actor_id: Optional[str] = None
    expected_version: Optional[int] = Field(None, ge=1)

    class Config:
        extra = "forbid"


class OrderStatusSummary(BaseModel):
    counts: dict[str, int]
    active: int
    total: int
