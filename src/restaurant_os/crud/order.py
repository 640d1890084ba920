import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.exceptions import NotFoundError, StaleOrderError
from restaurant_os.models import OrderHistory, OrderStatusEnum, PosOrder
from restaurant_os.services.composer import OrderDraft, cart_hash
from restaurant_os.services.order_status import (
    ACTION_TIMESTAMPS,
    OrderActionEnum,
    TERMINAL_STATUSES,
    next_status,
)

logger = logging.getLogger(__name__)


async def create_order(db: AsyncSession, draft: OrderDraft) -> PosOrder:
    """
    Inserts the order row for a composed draft.
    Totals come from the draft and are never recomputed afterwards.
    """
    order = PosOrder(**draft.to_row())
    db.add(order)
    await db.commit()
    await db.refresh(order)
    logger.info("Order %s created for tenant %s (total %s)", order.order_number, order.tenant_id, order.total_amount)
    return order


async def get_orders(
    db: AsyncSession,
    tenant_id: str,
    status: Optional[OrderStatusEnum] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[PosOrder]:
    """
    Tenant's orders, newest first, optionally filtered by status.
    """
    stmt = (
        select(PosOrder)
        .where(PosOrder.tenant_id == tenant_id)
        .order_by(PosOrder.created_at.desc(), PosOrder.id.desc())
    )

    if status:
        stmt = stmt.where(PosOrder.status == status)
    if limit:
        stmt = stmt.limit(limit)
    if offset:
        stmt = stmt.offset(offset)

    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_order_by_id(db: AsyncSession, tenant_id: str, order_id: str) -> Optional[PosOrder]:
    stmt = select(PosOrder).where(PosOrder.id == order_id, PosOrder.tenant_id == tenant_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def transition_order(
    db: AsyncSession,
    tenant_id: str,
    order_id: str,
    action: OrderActionEnum,
    actor_id: Optional[str] = None,
    expected_version: Optional[int] = None,
) -> PosOrder:
    """
    Moves an order along its lifecycle with one compare-and-set UPDATE.

    The update only matches when the row still has the status (and, if given,
    the version) the transition was validated against; otherwise nothing is
    written and StaleOrderError is raised.
    """
    order = await get_order_by_id(db, tenant_id, order_id)
    if not order:
        raise NotFoundError(f"Order with id={order_id} not found")

    current = OrderStatusEnum(order.status)
    if expected_version is not None and expected_version != order.version:
        raise StaleOrderError(order_id, expected_version)

    try:
        target = next_status(current, action)
    except ValueError:
        logger.warning("Rejected '%s' on order %s in status '%s'", getattr(action, "value", action), order_id, current.value)
        raise

    action = OrderActionEnum(action)
    now = datetime.now(timezone.utc)
    values = {"status": target, "version": PosOrder.version + 1, "updated_at": now}
    if action in ACTION_TIMESTAMPS:
        values[ACTION_TIMESTAMPS[action]] = now
    if action == OrderActionEnum.approve:
        values["approved_by"] = actor_id

    stmt = (
        update(PosOrder)
        .where(
            PosOrder.id == order_id,
            PosOrder.tenant_id == tenant_id,
            PosOrder.status == current,
            PosOrder.version == order.version,
        )
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    if result.rowcount != 1:
        await db.rollback()
        raise StaleOrderError(order_id, expected_version)
    await db.commit()

    await db.refresh(order)
    logger.info(
        "Order %s: %s -> %s (by %s)", order.order_number, current.value, target.value, actor_id or "unknown"
    )
    return order


async def get_orders_status_counts(db: AsyncSession, tenant_id: str) -> dict:
    stmt = (
        select(PosOrder.status, func.count(PosOrder.id).label("count_orders"))
        .where(PosOrder.tenant_id == tenant_id)
        .group_by(PosOrder.status)
    )
    result = await db.execute(stmt)
    counts = {status.value: 0 for status in OrderStatusEnum}
    for row in result.all():
        counts[OrderStatusEnum(row.status).value] = int(row.count_orders)

    active = sum(
        count for status, count in counts.items()
        if OrderStatusEnum(status) not in TERMINAL_STATUSES
    )
    return {"counts": counts, "active": active, "total": sum(counts.values())}


async def get_open_order_for_table(db: AsyncSession, table_id: str) -> Optional[PosOrder]:
    """Latest non-terminal order referencing the table, if any."""
    stmt = (
        select(PosOrder)
        .where(PosOrder.table_id == table_id, PosOrder.status.notin_(list(TERMINAL_STATUSES)))
        .order_by(PosOrder.created_at.desc())
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def log_order_history(db: AsyncSession, draft: OrderDraft, message: str) -> OrderHistory:
    customer = draft.customer or {}
    entry = OrderHistory(
        tenant_id=draft.tenant_id,
        cart_id=draft.cart_id,
        cart_hash=cart_hash(draft.lines, draft.created_at.isoformat()),
        customer_name=customer.get("name"),
        customer_phone=customer.get("phone"),
        order_type=draft.order_type.value,
        order_mode=draft.order_mode.value,
        items_count=draft.item_count,
        subtotal=draft.subtotal,
        delivery_fee=draft.delivery_fee,
        discount=draft.discount,
        total_amount=draft.total,
        order_data={
            "order_number": draft.order_number,
            "items": [line.to_dict() for line in draft.lines],
            "order_type": draft.mode_label,
            "customer_info": draft.customer,
            "order_notes": draft.notes,
            "preferred_time": draft.preferred_time,
            "table_number": draft.table_number,
            "message": message,
        },
        customer_notes=draft.notes,
    )
    db.add(entry)
    await db.commit()
    return entry
