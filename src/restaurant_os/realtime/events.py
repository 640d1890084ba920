from typing import Literal, Optional
from decimal import Decimal

from pydantic import BaseModel

from restaurant_os.schemas.order import OrderRead


class OrderInserted(BaseModel):
    type: Literal["INSERT"] = "INSERT"
    order: OrderRead


class OrderUpdated(BaseModel):
    type: Literal["UPDATE"] = "UPDATE"
    order: OrderRead


class OrderNotification(BaseModel):
    """Toast/sound payload for a newly arrived order."""

    order_id: str
    order_number: str
    total_amount: Decimal
    currency: Optional[str] = None
    table_number: Optional[str] = None
    play_sound: bool = True
