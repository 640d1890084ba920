"""
Order workflow entry points used by the API and the dashboard session.

Each function commits its write first and only then publishes the change to
the tenant's order feed.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.crud.menu import get_items_by_ids
from restaurant_os.crud.order import create_order, log_order_history, transition_order
from restaurant_os.crud.payment import create_payment
from restaurant_os.crud.table import get_table_by_id
from restaurant_os.exceptions import OrderValidationError
from restaurant_os.models import Payment, Tenant
from restaurant_os.realtime.events import OrderInserted, OrderUpdated
from restaurant_os.realtime.feed import OrderFeed
from restaurant_os.schemas.order import OrderPlace, OrderRead
from restaurant_os.schemas.payment import PaymentCreate
from restaurant_os.services.cart import Cart
from restaurant_os.services.composer import OrderDraft, compose_order, render_draft_message
from restaurant_os.services.order_status import OrderActionEnum
from restaurant_os.services.whatsapp import ChatLinks, build_whatsapp_links

logger = logging.getLogger(__name__)


@dataclass
class PlacedOrder:
    draft: OrderDraft
    message: str
    links: ChatLinks
    order: Optional[OrderRead] = None

    @property
    def persisted(self) -> bool:
        return self.order is not None


async def build_cart(db: AsyncSession, tenant: Tenant, order_in: OrderPlace) -> Cart:
    """Cart with name/price snapshots taken from the tenant's menu."""
    menu_items = await get_items_by_ids(db, tenant.id, (line.item_id for line in order_in.items))

    errors = []
    cart = Cart()
    for index, line in enumerate(order_in.items):
        item = menu_items.get(line.item_id)
        if item is None:
            errors.append({"field": f"items.{index}.item_id", "message": "Item is not available"})
            continue
        cart.add(item.id, item.name, item.price, quantity=line.quantity, notes=line.notes)

    if errors:
        raise OrderValidationError(errors)
    return cart


async def place_order(db: AsyncSession, feed: OrderFeed, tenant: Tenant, order_in: OrderPlace) -> PlacedOrder:
    """
    Validates and composes the order, then:
    1. inserts the POS order row,
    2. logs the cart to order history,
    3. returns the chat message and links for the device to open.

    Steps 1 and 2 are best effort. A failed write is logged and the message is
    still returned, so the restaurant receives the order through the chat either way.
    """
    table = None
    if order_in.table_id:
        table = await get_table_by_id(db, tenant.id, order_in.table_id)
        if table is None or not table.is_active:
            raise OrderValidationError.single("table_id", "Unknown table")

    cart = await build_cart(db, tenant, order_in)
    draft = compose_order(
        tenant,
        cart,
        order_in.mode,
        customer=order_in.customer,
        notes=order_in.notes,
        table=table,
        payment_method=order_in.payment_method,
        preferred_time=order_in.preferred_time,
    )
    message = render_draft_message(draft, tenant)
    placed = PlacedOrder(draft=draft, message=message, links=build_whatsapp_links(tenant.phone_number, message))

    inserted = None
    try:
        placed.order = OrderRead.model_validate(await create_order(db, draft))
        inserted = OrderInserted(order=placed.order)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Could not store order %s for tenant %s", draft.order_number, draft.tenant_id)

    try:
        await log_order_history(db, draft, message)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Could not log order history for cart %s", draft.cart_id)

    if inserted is not None:
        feed.publish(inserted)
    return placed


async def change_order_status(
    db: AsyncSession,
    feed: OrderFeed,
    tenant_id: str,
    order_id: str,
    action: OrderActionEnum,
    actor_id: Optional[str] = None,
    expected_version: Optional[int] = None,
) -> OrderRead:
    order = await transition_order(db, tenant_id, order_id, action, actor_id, expected_version)
    order_read = OrderRead.model_validate(order)
    feed.publish(OrderUpdated(order=order_read))
    return order_read


async def record_payment(
    db: AsyncSession,
    feed: OrderFeed,
    tenant_id: str,
    order_id: str,
    payment_in: PaymentCreate,
) -> Payment:
    payment, order = await create_payment(db, tenant_id, order_id, payment_in)
    feed.publish(OrderUpdated(order=OrderRead.model_validate(order)))
    return payment
