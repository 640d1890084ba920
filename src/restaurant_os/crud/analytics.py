from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.models import OrderHistory


async def get_order_analytics(
    db: AsyncSession,
    tenant_id: str,
    recent_days: int = 30,
    now: Optional[datetime] = None,
) -> dict:
    """
    Aggregates over the order history log:
    - count_orders, total_revenue, average_order_value
    - orders_by_mode (dine_in / takeaway / delivery)
    - recent_orders / recent_revenue for the last `recent_days` days
    """
    now = now or datetime.now(timezone.utc)
    since = now - timedelta(days=recent_days)

    totals = (
        await db.execute(
            select(
                func.count(OrderHistory.id).label("count_orders"),
                func.sum(OrderHistory.total_amount).label("total_revenue"),
            ).where(OrderHistory.tenant_id == tenant_id)
        )
    ).first()

    by_mode = await db.execute(
        select(OrderHistory.order_mode, func.count(OrderHistory.id).label("count_orders"))
        .where(OrderHistory.tenant_id == tenant_id)
        .group_by(OrderHistory.order_mode)
    )

    recent = (
        await db.execute(
            select(
                func.count(OrderHistory.id).label("count_orders"),
                func.sum(OrderHistory.total_amount).label("total_revenue"),
            ).where(OrderHistory.tenant_id == tenant_id, OrderHistory.created_at >= since)
        )
    ).first()

    count_orders = totals.count_orders or 0
    total_revenue = Decimal(str(totals.total_revenue or 0))
    average = total_revenue / count_orders if count_orders else Decimal(0)

    return {
        "count_orders": count_orders,
        "total_revenue": total_revenue,
        "average_order_value": round(average, 2),
        "orders_by_mode": {row.order_mode: int(row.count_orders) for row in by_mode.all()},
        "recent_days": recent_days,
        "recent_orders": recent.count_orders or 0,
        "recent_revenue": Decimal(str(recent.total_revenue or 0)),
    }
