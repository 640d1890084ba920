import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SUPER_ADMIN_TOKEN"] = "test-admin-token"

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from restaurant_os.db.base import Base
from restaurant_os.db.deps import get_sessionmaker
from restaurant_os.db.session import get_async_session
from restaurant_os.main import app
from restaurant_os.models import (
    MenuCategory,
    MenuItem,
    OrderStatusEnum,
    OrderTypeEnum,
    PosOrder,
    RestaurantTable,
    Tenant,
)
from restaurant_os.realtime.feed import OrderFeed, get_order_feed

ADMIN_HEADERS = {"X-Admin-Token": "test-admin-token"}


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def sessionmaker(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(sessionmaker):
    async with sessionmaker() as session:
        yield session


@pytest.fixture
def feed():
    return OrderFeed(queue_size=10)


@pytest.fixture
async def client(sessionmaker, feed):
    async def override_session():
        async with sessionmaker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_sessionmaker] = lambda: sessionmaker
    app.dependency_overrides[get_order_feed] = lambda: feed

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def tenant(db):
    tenant = Tenant(
        name="Al Sham Kitchen",
        slug="al-sham-kitchen",
        phone_number="+963944000111",
        branch_name="Mezzeh",
        currency="SYP",
        delivery_fee=Decimal("5000"),
    )
    db.add(tenant)
    await db.commit()
    await db.refresh(tenant)
    return tenant


@pytest.fixture
async def other_tenant(db):
    tenant = Tenant(name="Cafe Beirut", slug="cafe-beirut", phone_number="+961700000000", currency="USD")
    db.add(tenant)
    await db.commit()
    await db.refresh(tenant)
    return tenant


@pytest.fixture
async def category(db, tenant):
    category = MenuCategory(tenant_id=tenant.id, name="Starters", display_order=1)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category


@pytest.fixture
async def hummus(db, tenant, category):
    item = MenuItem(tenant_id=tenant.id, category_id=category.id, name="Hummus", price=Decimal("45"))
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


@pytest.fixture
async def falafel(db, tenant, category):
    item = MenuItem(tenant_id=tenant.id, category_id=category.id, name="Falafel", price=Decimal("12.50"))
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


@pytest.fixture
async def table(db, tenant):
    table = RestaurantTable(tenant_id=tenant.id, table_number="5", capacity=4)
    db.add(table)
    await db.commit()
    await db.refresh(table)
    return table


@pytest.fixture
def make_order(db):
    counter = iter(range(1, 10_000))

    async def factory(tenant, status=OrderStatusEnum.pending_approval, table=None, total="90"):
        n = next(counter)
        order = PosOrder(
            tenant_id=tenant.id,
            order_number=f"ORD-TEST-{n:05d}",
            status=status,
            order_type=OrderTypeEnum.table if table is not None else OrderTypeEnum.whatsapp,
            table_id=table.id if table is not None else None,
            customer_info={"name": "Rami"},
            items=[{"item_id": "item-hummus", "name": "Hummus", "price": "45", "quantity": 2, "notes": None}],
            subtotal=Decimal(total),
            total_amount=Decimal(total),
        )
        db.add(order)
        await db.commit()
        await db.refresh(order)
        return order

    return factory
