from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.api.errors import to_http_exception
from restaurant_os.crud.feedback import create_feedback, get_feedback_summary
from restaurant_os.crud.menu import get_public_menu
from restaurant_os.crud.table import get_table_by_id
from restaurant_os.crud.tenant import get_active_tenant_by_slug
from restaurant_os.db.session import get_async_session
from restaurant_os.exceptions import RestaurantOSError
from restaurant_os.models import Tenant
from restaurant_os.realtime.feed import OrderFeed, get_order_feed
from restaurant_os.schemas.feedback import FeedbackCreate, FeedbackRead, FeedbackSummary
from restaurant_os.schemas.menu import CategoryRead, MenuItemRead, PublicCategoryRead, PublicMenuRead
from restaurant_os.schemas.order import ChatLinksRead, OrderPlace, OrderPlaced
from restaurant_os.schemas.tenant import PublicTenantRead
from restaurant_os.schemas.table import TableRead
from restaurant_os.services.ordering import place_order


router = APIRouter(prefix="/public/menu", tags=["public"])


async def get_public_tenant(
    slug: str = Path(..., description="Restaurant slug"),
    db: AsyncSession = Depends(get_async_session),
) -> Tenant:
    tenant = await get_active_tenant_by_slug(db, slug)
    if not tenant:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return tenant


@router.get("/{slug}", response_model=PublicMenuRead)
async def get_menu(
    table: Optional[str] = Query(None, description="Table ID from the QR code"),
    tenant: Tenant = Depends(get_public_tenant),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Public menu: branding, active categories and available items.
    With ?table=<id> the response also carries the table the order will be scoped to.
    """
    categories, items_by_category = await get_public_menu(db, tenant.id)
    category_ids = {c.id for c in categories}

    table_row = None
    if table:
        table_row = await get_table_by_id(db, tenant.id, table)
        if not table_row or not table_row.is_active:
            raise HTTPException(status_code=404, detail="Table not found")

    return PublicMenuRead(
        tenant=PublicTenantRead.model_validate(tenant),
        categories=[
            PublicCategoryRead(
                **CategoryRead.model_validate(c).model_dump(),
                items=[MenuItemRead.model_validate(i) for i in items_by_category.get(c.id, [])],
            )
            for c in categories
        ],
        # items without a category, or whose category is hidden
        uncategorized=[
            MenuItemRead.model_validate(i)
            for category_id, items in items_by_category.items()
            if category_id not in category_ids
            for i in items
        ],
        table=TableRead.model_validate(table_row) if table_row else None,
    )


@router.post("/{slug}/orders", response_model=OrderPlaced, status_code=201)
async def place_order_endpoint(
    order_in: OrderPlace,
    tenant: Tenant = Depends(get_public_tenant),
    db: AsyncSession = Depends(get_async_session),
    feed: OrderFeed = Depends(get_order_feed),
):
    """
    Checkout. Returns the order (null if it could not be stored), the chat
    message, and the WhatsApp links the device should open.
    """
    try:
        placed = await place_order(db, feed, tenant, order_in)
    except RestaurantOSError as e:
        raise to_http_exception(e)

    return OrderPlaced(
        order=placed.order,
        order_number=placed.draft.order_number,
        total_amount=placed.draft.total,
        message=placed.message,
        whatsapp=ChatLinksRead(app_url=placed.links.app_url, web_url=placed.links.web_url),
        persisted=placed.persisted,
    )


@router.post("/{slug}/feedback", response_model=FeedbackRead, status_code=201)
async def leave_feedback(
    feedback_in: FeedbackCreate,
    tenant: Tenant = Depends(get_public_tenant),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Anonymous 1-5 star rating with an optional comment.
    """
    return await create_feedback(db, tenant.id, feedback_in)


@router.get("/{slug}/feedback", response_model=FeedbackSummary)
async def feedback_summary(
    tenant: Tenant = Depends(get_public_tenant),
    db: AsyncSession = Depends(get_async_session),
):
    return await get_feedback_summary(db, tenant.id)
