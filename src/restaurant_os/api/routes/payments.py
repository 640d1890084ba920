from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.api.deps import get_tenant_scope
from restaurant_os.api.errors import to_http_exception
from restaurant_os.crud.payment import get_payments, refund_payment
from restaurant_os.db.session import get_async_session
from restaurant_os.exceptions import RestaurantOSError
from restaurant_os.models import Tenant
from restaurant_os.realtime.feed import OrderFeed, get_order_feed
from restaurant_os.schemas.payment import PaymentCreate, PaymentRead, PaymentRefund
from restaurant_os.services.ordering import record_payment


router = APIRouter(prefix="/tenants/{tenant_id}", tags=["payments"])


@router.post("/orders/{order_id}/payments", response_model=PaymentRead, status_code=201)
async def create_payment_endpoint(
    payment_in: PaymentCreate,
    order_id: str = Path(..., description="Order ID"),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
    feed: OrderFeed = Depends(get_order_feed),
):
    """
    Records a payment against an order. For cash, the response carries the change to hand back.
    """
    try:
        return await record_payment(db, feed, tenant.id, order_id, payment_in)
    except RestaurantOSError as e:
        raise to_http_exception(e)


@router.get("/payments", response_model=List[PaymentRead])
async def list_payments(
    order_id: Optional[str] = Query(None, description="Filter by order"),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    return await get_payments(db, tenant.id, order_id=order_id)


@router.post("/payments/{payment_id}/refund", response_model=PaymentRead)
async def refund_payment_endpoint(
    refund_in: PaymentRefund,
    payment_id: str = Path(..., description="Payment ID"),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await refund_payment(db, tenant.id, payment_id, refund_in)
    except RestaurantOSError as e:
        raise to_http_exception(e)
