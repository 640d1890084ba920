from restaurant_os.models import OrderStatusEnum


async def test_cash_payment_returns_change_and_publishes(client, feed, tenant, make_order):
    order = await make_order(tenant, status=OrderStatusEnum.ready, total="90")

    async with feed.subscribe(tenant.id) as subscription:
        resp = await client.post(
            f"/tenants/{tenant.id}/orders/{order.id}/payments",
            json={"payment_method": "cash", "received_amount": "100", "processed_by": "staff-1"},
        )

        assert resp.status_code == 201
        body = resp.json()
        assert body["order_id"] == order.id
        assert body["amount"] == "90.00"
        assert body["received_amount"] == "100.00"
        assert body["change_amount"] == "10.00"
        assert body["payment_status"] == "completed"
        assert body["processed_by"] == "staff-1"

        event = subscription.inbox.get_nowait()
        assert event.type == "UPDATE"
        assert event.order.id == order.id
        assert event.order.payment_method == "cash"
        assert event.order.version == 2


async def test_cash_short_of_amount_is_rejected(client, tenant, make_order):
    order = await make_order(tenant, total="90")

    resp = await client.post(
        f"/tenants/{tenant.id}/orders/{order.id}/payments",
        json={"payment_method": "cash", "received_amount": "50"},
    )

    assert resp.status_code == 422
    assert resp.json()["detail"][0]["field"] == "received_amount"


async def test_split_payment_settles_outstanding_balance(client, tenant, make_order):
    order = await make_order(tenant, total="90")
    url = f"/tenants/{tenant.id}/orders/{order.id}/payments"

    resp = await client.post(url, json={"payment_method": "card", "amount": "50", "received_amount": "80"})
    assert resp.status_code == 201
    assert resp.json()["received_amount"] == "50.00"
    assert resp.json()["change_amount"] == "0.00"

    resp = await client.post(url, json={"payment_method": "digital", "amount": "45"})
    assert resp.status_code == 422
    assert resp.json()["detail"][0]["field"] == "amount"

    resp = await client.post(url, json={"payment_method": "digital", "transaction_reference": "TX-881"})
    assert resp.status_code == 201
    assert resp.json()["amount"] == "40.00"

    resp = await client.post(url, json={"payment_method": "cash"})
    assert resp.status_code == 422
    assert resp.json()["detail"][0]["message"] == "Order is already paid"

    resp = await client.get(f"/tenants/{tenant.id}/payments", params={"order_id": order.id})
    assert sorted(p["amount"] for p in resp.json()) == ["40.00", "50.00"]


async def test_cancelled_and_foreign_orders_cannot_be_paid(client, tenant, other_tenant, make_order):
    cancelled = await make_order(tenant, status=OrderStatusEnum.cancelled)
    foreign = await make_order(other_tenant)

    resp = await client.post(f"/tenants/{tenant.id}/orders/{cancelled.id}/payments", json={"payment_method": "cash"})
    assert resp.status_code == 422

    resp = await client.post(f"/tenants/{tenant.id}/orders/{foreign.id}/payments", json={"payment_method": "cash"})
    assert resp.status_code == 404


async def test_refund_marks_payment_and_reopens_balance(client, tenant, make_order):
    order = await make_order(tenant, total="90")
    resp = await client.post(f"/tenants/{tenant.id}/orders/{order.id}/payments", json={"payment_method": "card"})
    payment_id = resp.json()["id"]

    resp = await client.post(f"/tenants/{tenant.id}/payments/{payment_id}/refund", json={"notes": "Wrong table"})
    assert resp.status_code == 200
    assert resp.json()["payment_status"] == "refunded"
    assert resp.json()["notes"] == "Refunded 90.00 - Wrong table"

    resp = await client.post(f"/tenants/{tenant.id}/payments/{payment_id}/refund", json={})
    assert resp.status_code == 409

    resp = await client.post(f"/tenants/{tenant.id}/orders/{order.id}/payments", json={"payment_method": "cash"})
    assert resp.status_code == 201
    assert resp.json()["amount"] == "90.00"


async def test_refund_cannot_exceed_payment(client, tenant, make_order):
    order = await make_order(tenant, total="90")
    resp = await client.post(f"/tenants/{tenant.id}/orders/{order.id}/payments", json={"payment_method": "card"})

    resp = await client.post(f"/tenants/{tenant.id}/payments/{resp.json()['id']}/refund", json={"amount": "120"})
    assert resp.status_code == 422
