import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from restaurant_os.config import settings
from .events import OrderInserted, OrderUpdated

logger = logging.getLogger(__name__)


class Subscription:
    """Inbox of order events for one tenant."""

    def __init__(self, tenant_id: str, maxsize: int):
        self.tenant_id = tenant_id
        self.inbox: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    def deliver(self, event) -> None:
        try:
            self.inbox.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "Subscription inbox full for tenant %s, dropped %s event for order %s",
                self.tenant_id, event.type, event.order.id,
            )

    async def get(self):
        return await self.inbox.get()

    def __aiter__(self) -> AsyncIterator:
        return self

    async def __anext__(self):
        return await self.get()


class OrderFeed:
    """
    In-process change feed for the pos_orders table, filtered by tenant.
    Publishers call publish() after their write has committed.
    """

    def __init__(self, queue_size: Optional[int] = None):
        self.queue_size = queue_size or settings.FEED_QUEUE_SIZE
        self._subscribers: dict[str, set[Subscription]] = defaultdict(set)

    @asynccontextmanager
    async def subscribe(self, tenant_id: str) -> AsyncIterator[Subscription]:
        subscription = Subscription(tenant_id, self.queue_size)
        self._subscribers[tenant_id].add(subscription)
        logger.info("Order feed subscribed for tenant %s", tenant_id)
        try:
            yield subscription
        finally:
            subscribers = self._subscribers.get(tenant_id)
            if subscribers is not None:
                subscribers.discard(subscription)
                if not subscribers:
                    del self._subscribers[tenant_id]
            logger.info("Order feed released for tenant %s", tenant_id)

    def publish(self, event: OrderInserted | OrderUpdated) -> int:
        """Fans the event out to the order's tenant. Returns the number of subscribers reached."""
        subscribers = list(self._subscribers.get(event.order.tenant_id, ()))
        for subscription in subscribers:
            subscription.deliver(event)
        return len(subscribers)

    def subscriber_count(self, tenant_id: str) -> int:
        return len(self._subscribers.get(tenant_id, ()))


order_feed = OrderFeed()


def get_order_feed() -> OrderFeed:
    return order_feed
