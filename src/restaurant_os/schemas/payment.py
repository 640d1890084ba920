from pydantic import BaseModel, Field, condecimal
from typing import Optional
from datetime import datetime
from decimal import Decimal

from restaurant_os.models.payment import PaymentMethodEnum, PaymentStatusEnum


class PaymentCreate(BaseModel):
    """Amount defaults to the order total; received_amount is what the cashier took in for cash."""

    payment_method: PaymentMethodEnum
    amount: Optional[condecimal(gt=0, max_digits=10, decimal_places=2)] = None
    received_amount: Optional[condecimal(ge=0, max_digits=10, decimal_places=2)] = None
    processed_by: Optional[str] = None
    transaction_reference: Optional[str] = Field(None, max_length=128)
    notes: Optional[str] = None


class PaymentRefund(BaseModel):
    amount: Optional[condecimal(gt=0, max_digits=10, decimal_places=2)] = None
    notes: Optional[str] = None


class PaymentRead(BaseModel):
    id: str
    order_id: str
    payment_method: PaymentMethodEnum
    amount: Decimal
    received_amount: Optional[Decimal] = None
    change_amount: Decimal
    processed_by: Optional[str] = None
    payment_status: PaymentStatusEnum
    transaction_reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
