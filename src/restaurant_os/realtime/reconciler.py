"""
Keeps a dashboard's local order list in step with the tenant's order feed.

Events go through one reducer, apply_order_event():

- INSERT prepends the order unless its id is already present, so a
  redelivered insert is a no-op. With a limit, the oldest orders past it
  fall off the end.
- UPDATE replaces the order with the same id.
- UPDATE for an id that is not in the local list is ignored. The dashboard
  only holds the newest DASHBOARD_ORDER_LIMIT orders, and an update to an
  order outside that window must not pull it in.
"""
import asyncio
import logging
from contextlib import AsyncExitStack
from typing import AsyncIterator, Awaitable, Callable, Optional, Protocol

from restaurant_os.config import settings
from restaurant_os.exceptions import ActionInProgressError
from restaurant_os.models.order import OrderStatusEnum
from restaurant_os.schemas.order import OrderRead
from restaurant_os.services.order_status import OrderActionEnum, TERMINAL_STATUSES
from .events import OrderInserted, OrderNotification, OrderUpdated
from .feed import OrderFeed, Subscription

logger = logging.getLogger(__name__)


def apply_order_event(
    orders: list[OrderRead], event: OrderInserted | OrderUpdated, limit: Optional[int] = None
) -> tuple[list[OrderRead], bool]:
    """
    Returns the new order list and whether the event added a new order.
    The input list is never mutated.
    """
    order = event.order
    known = any(o.id == order.id for o in orders)

    if isinstance(event, OrderInserted):
        if known:
            return orders, False
        updated = [order, *orders]
        return (updated[:limit] if limit else updated), True

    if not known:
        logger.debug("Ignoring update for order %s outside the dashboard window", order.id)
        return orders, False
    return [order if o.id == order.id else o for o in orders], False


class OrderSource(Protocol):
    """Backend calls a dashboard needs."""

    async def list_orders(self, tenant_id: str, limit: int) -> list[OrderRead]: ...

    async def list_table_numbers(self, tenant_id: str) -> dict[str, str]: ...

    async def get_table_number(self, tenant_id: str, table_id: str) -> Optional[str]: ...

    async def transition(
        self, tenant_id: str, order_id: str, action: OrderActionEnum, actor_id: Optional[str]
    ) -> OrderRead: ...


NotificationHandler = Callable[[OrderNotification], Awaitable[None]]


class DashboardSession:
    """
    One dashboard's view of one tenant's orders.

    Use as an async context manager: entering loads the initial state and
    subscribes to the feed, leaving releases the subscription. A tenant
    switch means leaving this session and opening a new one.
    """

    def __init__(
        self,
        tenant_id: str,
        source: OrderSource,
        feed: OrderFeed,
        on_notification: Optional[NotificationHandler] = None,
        currency: Optional[str] = None,
        limit: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        self.tenant_id = tenant_id
        self.source = source
        self.feed = feed
        self.on_notification = on_notification
        self.currency = currency
        self.limit = limit or settings.DASHBOARD_ORDER_LIMIT
        self.timeout = timeout or settings.REQUEST_TIMEOUT_SECONDS

        self.orders: list[OrderRead] = []
        self.tables: dict[str, str] = {}
        self._in_flight: set[str] = set()
        self._subscription: Optional[Subscription] = None
        self._stack: Optional[AsyncExitStack] = None

    async def __aenter__(self) -> "DashboardSession":
        self._stack = AsyncExitStack()
        try:
            # subscribe before loading so nothing committed in between is missed
            self._subscription = await self._stack.enter_async_context(self.feed.subscribe(self.tenant_id))
            await self.load()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._stack is not None:
            stack, self._stack = self._stack, None
            await stack.aclose()
        self._subscription = None

    @property
    def is_open(self) -> bool:
        return self._subscription is not None

    async def _call(self, awaitable):
        return await asyncio.wait_for(awaitable, timeout=self.timeout)

    async def load(self) -> None:
        self.orders = await self._call(self.source.list_orders(self.tenant_id, self.limit))
        self.tables = await self._call(self.source.list_table_numbers(self.tenant_id))

    async def _cache_table(self, table_id: str) -> None:
        if table_id in self.tables:
            return
        try:
            number = await self._call(self.source.get_table_number(self.tenant_id, table_id))
        except (asyncio.TimeoutError, LookupError):
            logger.warning("Could not fetch table %s for tenant %s", table_id, self.tenant_id)
            return
        if number is not None:
            self.tables[table_id] = number

    async def handle(self, event: OrderInserted | OrderUpdated) -> Optional[OrderNotification]:
        """Applies one feed event; returns the notification for a newly arrived order."""
        self.orders, added = apply_order_event(self.orders, event, self.limit)
        if not added:
            return None

        order = event.order
        if order.table_id:
            await self._cache_table(order.table_id)

        notification = OrderNotification(
            order_id=order.id,
            order_number=order.order_number,
            total_amount=order.total_amount,
            currency=self.currency,
            table_number=self.tables.get(order.table_id) if order.table_id else None,
        )
        if self.on_notification is not None:
            await self.on_notification(notification)
        return notification

    async def next_event(self) -> tuple[OrderInserted | OrderUpdated, Optional[OrderNotification]]:
        if self._subscription is None:
            raise RuntimeError("Dashboard session is not open")
        event = await self._subscription.get()
        return event, await self.handle(event)

    async def events(self) -> AsyncIterator[tuple[OrderInserted | OrderUpdated, Optional[OrderNotification]]]:
        while self.is_open:
            yield await self.next_event()

    async def transition(self, order_id: str, action: OrderActionEnum, actor_id: Optional[str] = None) -> OrderRead:
        """
        Requests a status change. A second request for the same order while
        the first is pending raises ActionInProgressError instead of being sent.
        """
        if order_id in self._in_flight:
            raise ActionInProgressError(f"A status change for order {order_id} is already in progress")

        self._in_flight.add(order_id)
        try:
            order = await self._call(self.source.transition(self.tenant_id, order_id, action, actor_id))
        finally:
            self._in_flight.discard(order_id)

        self.orders, _ = apply_order_event(self.orders, OrderUpdated(order=order))
        return order

    def is_pending(self, order_id: str) -> bool:
        return order_id in self._in_flight

    def orders_by_status(self, status: OrderStatusEnum) -> list[OrderRead]:
        return [o for o in self.orders if o.status == status]

    def active_orders(self) -> list[OrderRead]:
        """Orders in the kitchen flow: approved and not yet completed or cancelled."""
        return [
            o for o in self.orders
            if o.status != OrderStatusEnum.pending_approval and o.status not in TERMINAL_STATUSES
        ]

    def status_counts(self) -> dict[str, int]:
        counts = {status.value: 0 for status in OrderStatusEnum}
        for order in self.orders:
            counts[order.status.value] += 1
        return counts
