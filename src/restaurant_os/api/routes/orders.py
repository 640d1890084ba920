from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.api.deps import get_tenant_scope
from restaurant_os.api.errors import to_http_exception
from restaurant_os.crud.order import get_order_by_id, get_orders, get_orders_status_counts
from restaurant_os.db.session import get_async_session
from restaurant_os.exceptions import RestaurantOSError
from restaurant_os.models import OrderStatusEnum, Tenant
from restaurant_os.realtime.feed import OrderFeed, get_order_feed
from restaurant_os.schemas.order import OrderRead, OrderStatusSummary, OrderTransition
from restaurant_os.services.ordering import change_order_status


router = APIRouter(prefix="/tenants/{tenant_id}/orders", tags=["orders"])


@router.get("/", response_model=List[OrderRead])
async def list_orders(
    status: Optional[OrderStatusEnum] = Query(None, description="Filter by status"),
    limit: Optional[int] = Query(None, ge=1, le=500, description="Max number of orders"),
    offset: Optional[int] = Query(None, ge=0, description="Pagination offset"),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Tenant's orders, newest first.
    """
    return await get_orders(db, tenant.id, status=status, limit=limit, offset=offset)


@router.get("/summary", response_model=OrderStatusSummary)
async def get_orders_summary(
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Order counts per status, plus active (non-terminal) and overall totals.
    """
    return await get_orders_status_counts(db, tenant.id)


@router.get("/{order_id}", response_model=OrderRead)
async def get_order(
    order_id: str = Path(..., description="Order ID"),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    order = await get_order_by_id(db, tenant.id, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.post("/{order_id}/transitions", response_model=OrderRead)
async def transition_order_endpoint(
    transition_in: OrderTransition,
    order_id: str = Path(..., description="Order ID"),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
    feed: OrderFeed = Depends(get_order_feed),
):
    """
    Applies a staff action (approve, reject, start_preparing, mark_ready,
    mark_completed, cancel). Invalid or stale transitions return 409 and
    leave the order unchanged.
    """
    try:
        return await change_order_status(
            db,
            feed,
            tenant.id,
            order_id,
            transition_in.action,
            actor_id=transition_in.actor_id,
            expected_version=transition_in.expected_version,
        )
    except RestaurantOSError as e:
        raise to_http_exception(e)
