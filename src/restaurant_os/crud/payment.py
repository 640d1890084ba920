import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.exceptions import ConflictError, NotFoundError, ValidationError
from restaurant_os.models import (
    OrderStatusEnum,
    Payment,
    PaymentMethodEnum,
    PaymentStatusEnum,
    PosOrder,
)
from restaurant_os.schemas.payment import PaymentCreate, PaymentRefund

logger = logging.getLogger(__name__)


async def get_paid_amount(db: AsyncSession, order_id: str) -> Decimal:
    """Sum of the order's completed payments."""
    stmt = select(func.sum(Payment.amount)).where(
        Payment.order_id == order_id,
        Payment.payment_status == PaymentStatusEnum.completed,
    )
    paid = (await db.execute(stmt)).scalar()
    return Decimal(str(paid or 0))


def settle(method: PaymentMethodEnum, amount: Decimal, received: Optional[Decimal]) -> Tuple[Decimal, Decimal]:
    """
    Returns (received, change) for a payment.
    Only cash hands back change; other methods are taken for the exact amount.
    """
    if method != PaymentMethodEnum.cash:
        return amount, Decimal("0")
    if received is None:
        received = amount
    if received < amount:
        raise ValidationError.single("received_amount", "Received amount is less than the amount due")
    return received, received - amount


async def create_payment(db: AsyncSession, tenant_id: str, order_id: str, payment_in: PaymentCreate) -> Tuple[Payment, PosOrder]:
    """
    Records a completed payment against an order and works out the change.

    The amount defaults to what is still owed on the order and may not exceed it.
    The order's payment method is updated and its version bumped so dashboards
    pick up the change.
    """
    stmt = select(PosOrder).where(PosOrder.id == order_id, PosOrder.tenant_id == tenant_id)
    order = (await db.execute(stmt)).scalars().first()
    if not order:
        raise NotFoundError(f"Order with id={order_id} not found")
    if order.status == OrderStatusEnum.cancelled:
        raise ValidationError.single("order_id", "Cancelled orders cannot be paid")

    outstanding = Decimal(str(order.total_amount)) - await get_paid_amount(db, order_id)
    if outstanding <= 0:
        raise ValidationError.single("order_id", "Order is already paid")

    amount = payment_in.amount if payment_in.amount is not None else outstanding
    if amount > outstanding:
        raise ValidationError.single("amount", f"Amount exceeds the outstanding balance of {outstanding}")

    received, change = settle(payment_in.payment_method, amount, payment_in.received_amount)

    payment = Payment(
        tenant_id=tenant_id,
        order_id=order.id,
        payment_method=payment_in.payment_method,
        amount=amount,
        received_amount=received,
        change_amount=change,
        processed_by=payment_in.processed_by,
        payment_status=PaymentStatusEnum.completed,
        transaction_reference=payment_in.transaction_reference,
        notes=payment_in.notes,
    )
    db.add(payment)

    order.payment_method = payment_in.payment_method.value
    order.version = order.version + 1
    order.updated_at = datetime.now(timezone.utc)

    await db.commit()
    await db.refresh(payment)
    await db.refresh(order)
    logger.info(
        "Payment %s on order %s: %s %s (change %s)",
        payment.id, order.order_number, payment_in.payment_method.value, amount, change,
    )
    return payment, order


async def get_payments(db: AsyncSession, tenant_id: str, order_id: Optional[str] = None) -> List[Payment]:
    stmt = select(Payment).where(Payment.tenant_id == tenant_id).order_by(Payment.created_at.desc(), Payment.id.desc())
    if order_id:
        stmt = stmt.where(Payment.order_id == order_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_payment_or_404(db: AsyncSession, tenant_id: str, payment_id: str) -> Payment:
    payment = await db.get(Payment, payment_id)
    if not payment or payment.tenant_id != tenant_id:
        raise NotFoundError(f"Payment with id={payment_id} not found")
    return payment


async def refund_payment(db: AsyncSession, tenant_id: str, payment_id: str, refund_in: PaymentRefund) -> Payment:
    payment = await get_payment_or_404(db, tenant_id, payment_id)
    if payment.payment_status != PaymentStatusEnum.completed:
        raise ConflictError(f"Payment {payment_id} is {PaymentStatusEnum(payment.payment_status).value}, not completed")

    amount = refund_in.amount if refund_in.amount is not None else Decimal(str(payment.amount))
    if amount > payment.amount:
        raise ValidationError.single("amount", "Refund exceeds the payment amount")

    payment.payment_status = PaymentStatusEnum.refunded
    payment.notes = f"Refunded {amount}" + (f" - {refund_in.notes}" if refund_in.notes else "")
    await db.commit()
    await db.refresh(payment)
    logger.info("Payment %s refunded (%s)", payment.id, amount)
    return payment
