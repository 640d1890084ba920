import asyncio
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from restaurant_os.exceptions import ActionInProgressError
from restaurant_os.models import OrderStatusEnum
from restaurant_os.realtime.events import OrderInserted, OrderUpdated
from restaurant_os.realtime.feed import OrderFeed
from restaurant_os.realtime.reconciler import DashboardSession, apply_order_event
from restaurant_os.realtime.source import DatabaseOrderSource
from restaurant_os.schemas.order import OrderRead
from restaurant_os.services.order_status import OrderActionEnum, next_status

TENANT_ID = "tenant-1"


def make_read(order_id, status=OrderStatusEnum.pending_approval, table_id=None, version=1, total="90"):
    now = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)
    return OrderRead(
        id=order_id,
        tenant_id=TENANT_ID,
        order_number=f"ORD-{order_id}",
        status=status,
        order_type="table" if table_id else "whatsapp",
        table_id=table_id,
        subtotal=Decimal(total),
        delivery_fee=Decimal("0"),
        discount_amount=Decimal("0"),
        total_amount=Decimal(total),
        version=version,
        created_at=now,
        updated_at=now,
    )


class FakeSource:
    def __init__(self, orders=(), tables=None, remote_tables=None):
        self.orders = list(orders)
        self.tables = dict(tables or {})
        self.remote_tables = dict(remote_tables or {})
        self.table_lookups = []
        self.list_delay = 0
        self.gate = None

    async def list_orders(self, tenant_id, limit):
        if self.list_delay:
            await asyncio.sleep(self.list_delay)
        return self.orders[:limit]

    async def list_table_numbers(self, tenant_id):
        return dict(self.tables)

    async def get_table_number(self, tenant_id, table_id):
        self.table_lookups.append(table_id)
        if table_id not in self.remote_tables:
            raise LookupError(table_id)
        return self.remote_tables[table_id]

    async def transition(self, tenant_id, order_id, action, actor_id):
        if self.gate is not None:
            await self.gate.wait()
        current = next(o for o in self.orders if o.id == order_id)
        return current.model_copy(update={"status": next_status(current.status, action), "version": current.version + 1})


def test_insert_is_idempotent():
    order = make_read("o1")

    orders, added = apply_order_event([], OrderInserted(order=order))
    assert added
    orders, added = apply_order_event(orders, OrderInserted(order=order))

    assert not added
    assert [o.id for o in orders] == ["o1"]


def test_insert_prepends():
    orders = [make_read("o1")]
    orders, _ = apply_order_event(orders, OrderInserted(order=make_read("o2")))
    assert [o.id for o in orders] == ["o2", "o1"]


def test_insert_trims_to_limit():
    orders = [make_read("o2"), make_read("o1")]
    orders, added = apply_order_event(orders, OrderInserted(order=make_read("o3")), limit=2)

    assert added
    assert [o.id for o in orders] == ["o3", "o2"]


def test_update_replaces_in_place():
    orders = [make_read("o2"), make_read("o1")]
    updated = make_read("o1", status=OrderStatusEnum.new, version=2)

    result, added = apply_order_event(orders, OrderUpdated(order=updated))

    assert not added
    assert [o.id for o in result] == ["o2", "o1"]
    assert result[1].status == OrderStatusEnum.new
    assert orders[1].status == OrderStatusEnum.pending_approval


def test_update_for_unknown_order_is_ignored():
    orders = [make_read("o1")]
    result, added = apply_order_event(orders, OrderUpdated(order=make_read("o-old", status=OrderStatusEnum.ready)))

    assert not added
    assert result == orders


async def test_session_loads_and_releases_subscription():
    feed = OrderFeed(queue_size=5)
    source = FakeSource(orders=[make_read("o1")], tables={"tb-1": "1"})

    async with DashboardSession(TENANT_ID, source, feed) as dashboard:
        assert dashboard.is_open
        assert [o.id for o in dashboard.orders] == ["o1"]
        assert dashboard.tables == {"tb-1": "1"}
        assert feed.subscriber_count(TENANT_ID) == 1

    assert not dashboard.is_open
    assert feed.subscriber_count(TENANT_ID) == 0
    with pytest.raises(RuntimeError):
        await dashboard.next_event()


async def test_new_order_notification_fetches_missing_table():
    feed = OrderFeed(queue_size=5)
    source = FakeSource(remote_tables={"tb-7": "7"})
    received = []

    async def on_notification(notification):
        received.append(notification)

    async with DashboardSession(
        TENANT_ID, source, feed, on_notification=on_notification, currency="SYP"
    ) as dashboard:
        order = make_read("o1", table_id="tb-7")
        assert feed.publish(OrderInserted(order=order)) == 1
        event, notification = await dashboard.next_event()

        assert event.type == "INSERT"
        assert notification.order_number == "ORD-o1"
        assert notification.table_number == "7"
        assert notification.currency == "SYP"
        assert notification.play_sound
        assert dashboard.tables["tb-7"] == "7"

        # redelivery: no duplicate row, no second toast
        feed.publish(OrderInserted(order=order))
        _, notification = await dashboard.next_event()
        assert notification is None

    assert len(received) == 1
    assert len(dashboard.orders) == 1
    assert source.table_lookups == ["tb-7"]


async def test_failed_table_lookup_still_notifies():
    feed = OrderFeed(queue_size=5)
    async with DashboardSession(TENANT_ID, FakeSource(), feed) as dashboard:
        notification = await dashboard.handle(OrderInserted(order=make_read("o1", table_id="tb-gone")))

    assert notification is not None
    assert notification.table_number is None


async def test_session_keeps_newest_orders_within_limit():
    feed = OrderFeed(queue_size=5)
    async with DashboardSession(TENANT_ID, FakeSource(orders=[make_read("o1")]), feed, limit=2) as dashboard:
        for order_id in ("o2", "o3", "o4"):
            feed.publish(OrderInserted(order=make_read(order_id)))
            await dashboard.next_event()

        assert [o.id for o in dashboard.orders] == ["o4", "o3"]

        # an update for an order that fell out of the window is ignored
        feed.publish(OrderUpdated(order=make_read("o1", status=OrderStatusEnum.new, version=2)))
        await dashboard.next_event()
        assert [o.id for o in dashboard.orders] == ["o4", "o3"]


async def test_other_tenants_events_are_not_delivered():
    feed = OrderFeed(queue_size=5)
    async with DashboardSession(TENANT_ID, FakeSource(), feed) as dashboard:
        foreign = make_read("o9").model_copy(update={"tenant_id": "tenant-2"})
        assert feed.publish(OrderInserted(order=foreign)) == 0
        assert dashboard.orders == []


async def test_transition_guards_double_submit():
    feed = OrderFeed(queue_size=5)
    source = FakeSource(orders=[make_read("o1")])
    source.gate = asyncio.Event()

    async with DashboardSession(TENANT_ID, source, feed) as dashboard:
        first = asyncio.create_task(dashboard.transition("o1", OrderActionEnum.approve, "staff-1"))
        await asyncio.sleep(0)

        assert dashboard.is_pending("o1")
        with pytest.raises(ActionInProgressError):
            await dashboard.transition("o1", OrderActionEnum.approve, "staff-1")

        source.gate.set()
        order = await first

        assert order.status == OrderStatusEnum.new
        assert not dashboard.is_pending("o1")
        assert dashboard.orders[0].status == OrderStatusEnum.new
        assert dashboard.orders[0].version == 2


async def test_load_timeout_releases_subscription():
    feed = OrderFeed(queue_size=5)
    source = FakeSource()
    source.list_delay = 1

    with pytest.raises(asyncio.TimeoutError):
        async with DashboardSession(TENANT_ID, source, feed, timeout=0.01):
            pass

    assert feed.subscriber_count(TENANT_ID) == 0


async def test_views_over_orders():
    feed = OrderFeed(queue_size=5)
    source = FakeSource(orders=[
        make_read("o1"),
        make_read("o2", status=OrderStatusEnum.new),
        make_read("o3", status=OrderStatusEnum.preparing),
        make_read("o4", status=OrderStatusEnum.completed),
    ])

    async with DashboardSession(TENANT_ID, source, feed) as dashboard:
        assert [o.id for o in dashboard.active_orders()] == ["o2", "o3"]
        assert [o.id for o in dashboard.orders_by_status(OrderStatusEnum.pending_approval)] == ["o1"]
        counts = dashboard.status_counts()

    assert counts["pending_approval"] == 1
    assert counts["completed"] == 1
    assert counts["cancelled"] == 0


async def test_full_inbox_drops_events():
    feed = OrderFeed(queue_size=1)
    async with feed.subscribe(TENANT_ID) as subscription:
        feed.publish(OrderInserted(order=make_read("o1")))
        feed.publish(OrderInserted(order=make_read("o2")))

        assert subscription.dropped == 1
        assert (await subscription.get()).order.id == "o1"


async def test_database_source_round_trip(sessionmaker, feed, tenant, table, make_order):
    order = await make_order(tenant, table=table)
    source = DatabaseOrderSource(sessionmaker, feed)

    async with DashboardSession(tenant.id, source, feed) as dashboard:
        assert [o.id for o in dashboard.orders] == [order.id]
        assert dashboard.tables == {table.id: "5"}

        updated = await dashboard.transition(order.id, OrderActionEnum.approve, "staff-1")
        assert updated.status == OrderStatusEnum.new

        # the committed change also arrives through the feed
        event, notification = await dashboard.next_event()
        assert event.type == "UPDATE"
        assert event.order.version == 2
        assert notification is None

    assert len(dashboard.orders) == 1
    assert dashboard.orders[0].status == OrderStatusEnum.new
