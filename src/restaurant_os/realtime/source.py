from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from restaurant_os.crud.order import get_orders
from restaurant_os.crud.table import get_table_by_id, get_table_numbers
from restaurant_os.schemas.order import OrderRead
from restaurant_os.services.order_status import OrderActionEnum
from restaurant_os.services.ordering import change_order_status
from .feed import OrderFeed


class DatabaseOrderSource:
    """OrderSource backed by the service's own database; one session per call."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession], feed: OrderFeed):
        self.sessionmaker = sessionmaker
        self.feed = feed

    async def list_orders(self, tenant_id: str, limit: int) -> list[OrderRead]:
        async with self.sessionmaker() as db:
            orders = await get_orders(db, tenant_id, limit=limit)
            return [OrderRead.model_validate(o) for o in orders]

    async def list_table_numbers(self, tenant_id: str) -> dict[str, str]:
        async with self.sessionmaker() as db:
            return await get_table_numbers(db, tenant_id)

    async def get_table_number(self, tenant_id: str, table_id: str) -> Optional[str]:
        async with self.sessionmaker() as db:
            table = await get_table_by_id(db, tenant_id, table_id)
            return table.table_number if table else None

    async def transition(
        self, tenant_id: str, order_id: str, action: OrderActionEnum, actor_id: Optional[str]
    ) -> OrderRead:
        async with self.sessionmaker() as db:
            return await change_order_status(db, self.feed, tenant_id, order_id, action, actor_id)
