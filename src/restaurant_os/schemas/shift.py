from pydantic import BaseModel, computed_field, condecimal
from typing import Optional
from datetime import datetime
from decimal import Decimal

from restaurant_os.models.shift import ShiftStatusEnum

Money = condecimal(ge=0, max_digits=10, decimal_places=2)


class ShiftOpen(BaseModel):
    staff_user_id: str
    opening_cash: Money = Decimal("0")


class ShiftClose(BaseModel):
    closing_cash: Money
    notes: Optional[str] = None


class ShiftRead(BaseModel):
    id: str
    staff_user_id: str
    status: ShiftStatusEnum
    shift_start: datetime
    shift_end: Optional[datetime] = None
    opening_cash: Decimal
    closing_cash: Optional[Decimal] = None
    total_sales: Decimal
    total_orders: int
    cash_payments: Decimal
    card_payments: Decimal
    digital_payments: Decimal
    discounts_given: Decimal
    notes: Optional[str] = None

    class Config:
        from_attributes = True

    @computed_field
    @property
    def cash_difference(self) -> Optional[Decimal]:
        """Counted cash minus opening cash plus cash takings; None while the shift is open."""
        if self.closing_cash is None:
            return None
        return self.closing_cash - (self.opening_cash + self.cash_payments)
