from restaurant_os.models import Shift, StaffRoleEnum, StaffUser


async def test_create_staff_hides_pin(client, tenant):
    resp = await client.post(
        f"/tenants/{tenant.id}/staff/",
        json={"staff_name": "Lina", "role": "cashier", "pin_code": "4821", "permissions": {"refunds": True}},
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["staff_name"] == "Lina"
    assert body["role"] == "cashier"
    assert body["permissions"] == {"refunds": True}
    assert "pin_code" not in body


async def test_pin_must_be_digits(client, tenant):
    resp = await client.post(
        f"/tenants/{tenant.id}/staff/", json={"staff_name": "Lina", "role": "cashier", "pin_code": "12ab"}
    )
    assert resp.status_code == 422


async def test_update_and_filter_active(client, tenant, other_tenant):
    resp = await client.post(f"/tenants/{tenant.id}/staff/", json={"staff_name": "Omar", "role": "waiter"})
    staff_id = resp.json()["id"]

    resp = await client.patch(f"/tenants/{tenant.id}/staff/{staff_id}", json={"is_active": False, "role": "manager"})
    assert resp.status_code == 200
    assert resp.json()["role"] == "manager"

    resp = await client.get(f"/tenants/{tenant.id}/staff/", params={"active_only": True})
    assert resp.json() == []

    resp = await client.get(f"/tenants/{tenant.id}/staff/")
    assert [s["id"] for s in resp.json()] == [staff_id]

    resp = await client.patch(f"/tenants/{other_tenant.id}/staff/{staff_id}", json={"is_active": True})
    assert resp.status_code == 404


async def test_delete_staff(client, sessionmaker, tenant):
    resp = await client.post(f"/tenants/{tenant.id}/staff/", json={"staff_name": "Omar", "role": "waiter"})
    staff_id = resp.json()["id"]

    resp = await client.delete(f"/tenants/{tenant.id}/staff/{staff_id}")
    assert resp.status_code == 204

    async with sessionmaker() as session:
        assert await session.get(StaffUser, staff_id) is None


async def test_staff_with_shifts_cannot_be_deleted(client, db, tenant):
    staff = StaffUser(tenant_id=tenant.id, staff_name="Lina", role=StaffRoleEnum.cashier)
    db.add(staff)
    await db.commit()
    db.add(Shift(tenant_id=tenant.id, staff_user_id=staff.id))
    await db.commit()

    resp = await client.delete(f"/tenants/{tenant.id}/staff/{staff.id}")
    assert resp.status_code == 409
