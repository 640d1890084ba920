import asyncio
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from restaurant_os.crud.tenant import get_tenant
from restaurant_os.db.deps import get_sessionmaker
from restaurant_os.realtime.feed import OrderFeed, get_order_feed
from restaurant_os.realtime.reconciler import DashboardSession
from restaurant_os.realtime.source import DatabaseOrderSource

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])

TENANT_NOT_FOUND = 4404


async def _pump(ws: WebSocket, dashboard: DashboardSession) -> None:
    async for event, notification in dashboard.events():
        payload = {"type": event.type, "order": event.order}
        if notification is not None:
            payload["notification"] = notification
        await ws.send_json(jsonable_encoder(payload))


async def _drain(ws: WebSocket) -> None:
    # clients don't send anything meaningful; text and binary frames are both ignored
    while True:
        message = await ws.receive()
        if message["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(message.get("code", 1000))


@router.websocket("/ws/tenants/{tenant_id}/orders")
async def orders_socket(
    ws: WebSocket,
    tenant_id: str,
    sessionmaker: async_sessionmaker[AsyncSession] = Depends(get_sessionmaker),
    feed: OrderFeed = Depends(get_order_feed),
):
    """
    Dashboard feed: a snapshot of the latest orders and table numbers, then
    one message per order insert/update. Inserts carry a notification.
    """
    async with sessionmaker() as db:
        tenant = await get_tenant(db, tenant_id)
        currency = tenant.currency if tenant else None
        active = bool(tenant and tenant.is_active)

    await ws.accept()
    if not active:
        await ws.close(code=TENANT_NOT_FOUND)
        return

    source = DatabaseOrderSource(sessionmaker, feed)
    async with DashboardSession(tenant_id, source, feed, currency=currency) as dashboard:
        await ws.send_json(jsonable_encoder({"type": "snapshot", "orders": dashboard.orders, "tables": dashboard.tables}))

        pump = asyncio.create_task(_pump(ws, dashboard))
        drain = asyncio.create_task(_drain(ws))
        try:
            done, _ = await asyncio.wait({pump, drain}, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                exc = task.exception()
                if exc is not None and not isinstance(exc, WebSocketDisconnect):
                    raise exc
        finally:
            for task in (pump, drain):
                task.cancel()
            await asyncio.gather(pump, drain, return_exceptions=True)
    logger.info("Dashboard socket closed for tenant %s", tenant_id)
