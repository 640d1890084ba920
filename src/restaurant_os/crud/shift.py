import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.exceptions import ConflictError, NotFoundError, ValidationError
from restaurant_os.models import (
    Payment,
    PaymentMethodEnum,
    PaymentStatusEnum,
    PosOrder,
    Shift,
    ShiftStatusEnum,
    StaffUser,
)
from restaurant_os.schemas.shift import ShiftClose, ShiftOpen

logger = logging.getLogger(__name__)


async def get_shifts(db: AsyncSession, tenant_id: str, status: Optional[ShiftStatusEnum] = None) -> List[Shift]:
    stmt = select(Shift).where(Shift.tenant_id == tenant_id).order_by(Shift.shift_start.desc())
    if status:
        stmt = stmt.where(Shift.status == status)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_current_shift(db: AsyncSession, tenant_id: str) -> Optional[Shift]:
    stmt = select(Shift).where(Shift.tenant_id == tenant_id, Shift.status == ShiftStatusEnum.open)
    result = await db.execute(stmt)
    return result.scalars().first()


async def open_shift(db: AsyncSession, tenant_id: str, shift_in: ShiftOpen) -> Shift:
    """A tenant has at most one open shift at a time."""
    staff = await db.get(StaffUser, shift_in.staff_user_id)
    if not staff or staff.tenant_id != tenant_id or not staff.is_active:
        raise ValidationError.single("staff_user_id", "Unknown or inactive staff member")

    current = await get_current_shift(db, tenant_id)
    if current:
        raise ConflictError(f"Shift {current.id} is still open")

    shift = Shift(
        tenant_id=tenant_id,
        staff_user_id=staff.id,
        opening_cash=shift_in.opening_cash,
        status=ShiftStatusEnum.open,
        shift_start=datetime.now(timezone.utc),
    )
    db.add(shift)
    await db.commit()
    await db.refresh(shift)
    logger.info("Shift %s opened by %s for tenant %s", shift.id, staff.staff_name, tenant_id)
    return shift


async def _shift_totals(db: AsyncSession, tenant_id: str, start: datetime, end: datetime) -> dict:
    """Completed payments taken between start and end, per method, plus the orders they settled."""
    window = (
        Payment.tenant_id == tenant_id,
        Payment.payment_status == PaymentStatusEnum.completed,
        Payment.created_at >= start,
        Payment.created_at <= end,
    )
    by_method = await db.execute(
        select(Payment.payment_method, func.sum(Payment.amount).label("total"))
        .where(*window)
        .group_by(Payment.payment_method)
    )
    sums = {PaymentMethodEnum(row.payment_method): Decimal(str(row.total or 0)) for row in by_method.all()}

    paid_orders = select(Payment.order_id).where(*window).distinct().subquery()
    orders = (
        await db.execute(
            select(
                func.count(PosOrder.id).label("count_orders"),
                func.sum(PosOrder.discount_amount).label("discounts"),
            ).where(PosOrder.id.in_(select(paid_orders.c.order_id)))
        )
    ).first()

    return {
        "cash_payments": sums.get(PaymentMethodEnum.cash, Decimal("0")),
        "card_payments": sums.get(PaymentMethodEnum.card, Decimal("0")),
        "digital_payments": sums.get(PaymentMethodEnum.digital, Decimal("0")),
        "total_sales": sum(sums.values(), Decimal("0")),
        "total_orders": orders.count_orders or 0,
        "discounts_given": Decimal(str(orders.discounts or 0)),
    }


async def close_shift(db: AsyncSession, tenant_id: str, shift_id: str, close_in: ShiftClose) -> Shift:
    shift = await db.get(Shift, shift_id)
    if not shift or shift.tenant_id != tenant_id:
        raise NotFoundError(f"Shift with id={shift_id} not found")
    if shift.status == ShiftStatusEnum.closed:
        raise ConflictError(f"Shift {shift_id} is already closed")

    now = datetime.now(timezone.utc)
    for key, value in (await _shift_totals(db, tenant_id, shift.shift_start, now)).items():
        setattr(shift, key, value)
    shift.shift_end = now
    shift.closing_cash = close_in.closing_cash
    shift.notes = close_in.notes
    shift.status = ShiftStatusEnum.closed

    await db.commit()
    await db.refresh(shift)
    logger.info("Shift %s closed for tenant %s (sales %s)", shift.id, tenant_id, shift.total_sales)
    return shift
