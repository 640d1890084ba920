from decimal import Decimal

import pytest
from sqlalchemy import select, update

from restaurant_os.crud import order as crud_order
from restaurant_os.exceptions import StaleOrderError
from restaurant_os.models import OrderStatusEnum, PosOrder
from restaurant_os.services.order_status import OrderActionEnum


async def test_list_orders_newest_first(client, tenant, make_order):
    first = await make_order(tenant)
    second = await make_order(tenant, status=OrderStatusEnum.new)
    third = await make_order(tenant)

    resp = await client.get(f"/tenants/{tenant.id}/orders/")
    assert resp.status_code == 200
    assert [o["id"] for o in resp.json()] == [third.id, second.id, first.id]

    resp = await client.get(f"/tenants/{tenant.id}/orders/", params={"status": "new"})
    assert [o["id"] for o in resp.json()] == [second.id]

    resp = await client.get(f"/tenants/{tenant.id}/orders/", params={"limit": 1, "offset": 1})
    assert [o["id"] for o in resp.json()] == [second.id]


async def test_orders_are_tenant_scoped(client, tenant, other_tenant, make_order):
    order = await make_order(other_tenant)

    resp = await client.get(f"/tenants/{tenant.id}/orders/")
    assert resp.json() == []

    resp = await client.get(f"/tenants/{tenant.id}/orders/{order.id}")
    assert resp.status_code == 404

    resp = await client.post(f"/tenants/{tenant.id}/orders/{order.id}/transitions", json={"action": "approve"})
    assert resp.status_code == 404


async def test_approve_stamps_order_and_publishes(client, feed, tenant, make_order):
    order = await make_order(tenant)

    async with feed.subscribe(tenant.id) as subscription:
        resp = await client.post(
            f"/tenants/{tenant.id}/orders/{order.id}/transitions",
            json={"action": "approve", "actor_id": "staff-1"},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "new"
        assert body["version"] == 2
        assert body["approved_by"] == "staff-1"
        assert body["approved_at"] is not None

        event = subscription.inbox.get_nowait()
        assert event.type == "UPDATE"
        assert event.order.id == order.id
        assert event.order.status == OrderStatusEnum.new


async def test_full_lifecycle(client, tenant, make_order):
    order = await make_order(tenant)
    url = f"/tenants/{tenant.id}/orders/{order.id}/transitions"

    for action, status in [
        ("approve", "new"),
        ("start_preparing", "preparing"),
        ("mark_ready", "ready"),
        ("mark_completed", "completed"),
    ]:
        resp = await client.post(url, json={"action": action})
        assert resp.status_code == 200, resp.text
        assert resp.json()["status"] == status

    body = resp.json()
    assert body["version"] == 5
    assert body["preparation_start_time"] is not None
    assert body["ready_time"] is not None
    assert body["completion_time"] is not None
    assert Decimal(body["total_amount"]) == Decimal("90")


async def test_invalid_transition_leaves_order_unchanged(client, feed, tenant, make_order):
    order = await make_order(tenant, status=OrderStatusEnum.ready)

    async with feed.subscribe(tenant.id) as subscription:
        resp = await client.post(
            f"/tenants/{tenant.id}/orders/{order.id}/transitions", json={"action": "cancel"}
        )
        assert subscription.inbox.empty()

    assert resp.status_code == 409
    assert resp.json()["detail"]["current_status"] == "ready"
    assert resp.json()["detail"]["requested"] == "cancel"

    resp = await client.get(f"/tenants/{tenant.id}/orders/{order.id}")
    assert resp.json()["status"] == "ready"
    assert resp.json()["version"] == 1


async def test_second_approve_is_rejected(client, tenant, make_order):
    order = await make_order(tenant)
    url = f"/tenants/{tenant.id}/orders/{order.id}/transitions"

    assert (await client.post(url, json={"action": "approve", "actor_id": "staff-1"})).status_code == 200
    resp = await client.post(url, json={"action": "approve", "actor_id": "staff-2"})

    assert resp.status_code == 409
    resp = await client.get(f"/tenants/{tenant.id}/orders/{order.id}")
    assert resp.json()["approved_by"] == "staff-1"


async def test_stale_version_is_rejected(client, tenant, make_order):
    order = await make_order(tenant)

    resp = await client.post(
        f"/tenants/{tenant.id}/orders/{order.id}/transitions",
        json={"action": "approve", "expected_version": 3},
    )

    assert resp.status_code == 409
    assert resp.json()["detail"]["order_id"] == order.id
    resp = await client.get(f"/tenants/{tenant.id}/orders/{order.id}")
    assert resp.json()["status"] == "pending_approval"


async def test_write_between_read_and_update_is_rejected(monkeypatch, db, sessionmaker, tenant, make_order):
    order = await make_order(tenant)
    order_id = order.id
    read_order = crud_order.get_order_by_id

    async def read_then_concurrent_write(session, tenant_id, order_id):
        row = await read_order(session, tenant_id, order_id)
        async with sessionmaker() as other:
            await other.execute(
                update(PosOrder).where(PosOrder.id == order_id).values(version=PosOrder.version + 1)
            )
            await other.commit()
        return row

    monkeypatch.setattr(crud_order, "get_order_by_id", read_then_concurrent_write)

    with pytest.raises(StaleOrderError):
        await crud_order.transition_order(db, tenant.id, order_id, OrderActionEnum.approve, actor_id="staff-1")

    async with sessionmaker() as session:
        row = (await session.execute(select(PosOrder).where(PosOrder.id == order_id))).scalars().one()
        assert row.status == OrderStatusEnum.pending_approval
        assert row.version == 2
        assert row.approved_by is None


async def test_unknown_action_is_a_validation_error(client, tenant, make_order):
    order = await make_order(tenant)
    resp = await client.post(f"/tenants/{tenant.id}/orders/{order.id}/transitions", json={"action": "teleport"})
    assert resp.status_code == 422


async def test_summary_counts(client, tenant, make_order):
    await make_order(tenant)
    await make_order(tenant, status=OrderStatusEnum.preparing)
    await make_order(tenant, status=OrderStatusEnum.completed)

    resp = await client.get(f"/tenants/{tenant.id}/orders/summary")
    body = resp.json()

    assert resp.status_code == 200
    assert body["counts"]["pending_approval"] == 1
    assert body["counts"]["preparing"] == 1
    assert body["counts"]["completed"] == 1
    assert body["counts"]["cancelled"] == 0
    assert body["active"] == 2
    assert body["total"] == 3


async def test_inactive_tenant_loses_access(client, db, tenant):
    tenant.is_active = False
    await db.commit()

    resp = await client.get(f"/tenants/{tenant.id}/orders/")
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Access denied"

    resp = await client.get("/tenants/missing/orders/")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Tenant with id=missing not found"
