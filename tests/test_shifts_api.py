import pytest

from restaurant_os.models import StaffRoleEnum, StaffUser


@pytest.fixture
async def cashier(db, tenant):
    staff = StaffUser(tenant_id=tenant.id, staff_name="Lina", role=StaffRoleEnum.cashier)
    db.add(staff)
    await db.commit()
    await db.refresh(staff)
    return staff


async def test_open_shift_and_read_current(client, tenant, cashier):
    resp = await client.get(f"/tenants/{tenant.id}/shifts/current")
    assert resp.json() is None

    resp = await client.post(f"/tenants/{tenant.id}/shifts/", json={"staff_user_id": cashier.id, "opening_cash": "200"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "open"
    assert body["opening_cash"] == "200.00"
    assert body["cash_difference"] is None

    resp = await client.get(f"/tenants/{tenant.id}/shifts/current")
    assert resp.json()["id"] == body["id"]


async def test_only_one_open_shift(client, tenant, cashier):
    resp = await client.post(f"/tenants/{tenant.id}/shifts/", json={"staff_user_id": cashier.id})
    assert resp.status_code == 201

    resp = await client.post(f"/tenants/{tenant.id}/shifts/", json={"staff_user_id": cashier.id})
    assert resp.status_code == 409


async def test_shift_needs_active_staff_of_tenant(client, db, tenant, other_tenant, cashier):
    resp = await client.post(f"/tenants/{other_tenant.id}/shifts/", json={"staff_user_id": cashier.id})
    assert resp.status_code == 422
    assert resp.json()["detail"][0]["field"] == "staff_user_id"

    cashier.is_active = False
    await db.commit()
    resp = await client.post(f"/tenants/{tenant.id}/shifts/", json={"staff_user_id": cashier.id})
    assert resp.status_code == 422


async def test_close_shift_totals_payments(client, tenant, cashier, make_order):
    resp = await client.post(f"/tenants/{tenant.id}/shifts/", json={"staff_user_id": cashier.id, "opening_cash": "200"})
    shift_id = resp.json()["id"]

    dine_in = await make_order(tenant, total="90")
    takeaway = await make_order(tenant, total="40")
    await client.post(
        f"/tenants/{tenant.id}/orders/{dine_in.id}/payments",
        json={"payment_method": "cash", "received_amount": "100"},
    )
    await client.post(f"/tenants/{tenant.id}/orders/{takeaway.id}/payments", json={"payment_method": "card"})

    resp = await client.post(
        f"/tenants/{tenant.id}/shifts/{shift_id}/close", json={"closing_cash": "290", "notes": "Quiet night"}
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "closed"
    assert body["shift_end"] is not None
    assert body["cash_payments"] == "90.00"
    assert body["card_payments"] == "40.00"
    assert body["digital_payments"] == "0.00"
    assert body["total_sales"] == "130.00"
    assert body["total_orders"] == 2
    assert body["cash_difference"] == "0.00"
    assert body["notes"] == "Quiet night"

    resp = await client.post(f"/tenants/{tenant.id}/shifts/{shift_id}/close", json={"closing_cash": "290"})
    assert resp.status_code == 409

    resp = await client.get(f"/tenants/{tenant.id}/shifts/", params={"status": "closed"})
    assert [s["id"] for s in resp.json()] == [shift_id]
    resp = await client.get(f"/tenants/{tenant.id}/shifts/current")
    assert resp.json() is None
