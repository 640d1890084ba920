from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.config import settings
from restaurant_os.crud.order import get_open_order_for_table
from restaurant_os.exceptions import NotFoundError
from restaurant_os.models import RestaurantTable, Tenant
from restaurant_os.schemas.table import CurrentOrder, TableCreate, TableUpdate, TableWithOrder


def qr_payload(origin: str, tenant_slug: str, table_id: str) -> str:
    """URL encoded in a table's QR code."""
    return f"{origin.rstrip('/')}/menu/{tenant_slug}?table={table_id}"


async def get_tables(db: AsyncSession, tenant_id: str, active_only: bool = False) -> List[RestaurantTable]:
    stmt = (
        select(RestaurantTable)
        .where(RestaurantTable.tenant_id == tenant_id)
        .order_by(RestaurantTable.table_number)
    )
    if active_only:
        stmt = stmt.where(RestaurantTable.is_active.is_(True))
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_table_by_id(db: AsyncSession, tenant_id: str, table_id: str) -> Optional[RestaurantTable]:
    stmt = select(RestaurantTable).where(RestaurantTable.id == table_id, RestaurantTable.tenant_id == tenant_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_table_or_404(db: AsyncSession, tenant_id: str, table_id: str) -> RestaurantTable:
    table = await get_table_by_id(db, tenant_id, table_id)
    if not table:
        raise NotFoundError(f"Table with id={table_id} not found")
    return table


async def get_tables_with_orders(db: AsyncSession, tenant_id: str) -> List[TableWithOrder]:
    tables = await get_tables(db, tenant_id)
    out = []
    for table in tables:
        row = TableWithOrder.model_validate(table)
        order = await get_open_order_for_table(db, table.id)
        if order:
            row.current_order = CurrentOrder.model_validate(order)
        out.append(row)
    return out


async def get_table_numbers(db: AsyncSession, tenant_id: str) -> dict[str, str]:
    result = await db.execute(
        select(RestaurantTable.id, RestaurantTable.table_number).where(RestaurantTable.tenant_id == tenant_id)
    )
    return {row.id: row.table_number for row in result.all()}


async def create_table(db: AsyncSession, tenant: Tenant, table_in: TableCreate) -> RestaurantTable:
    table = RestaurantTable(tenant_id=tenant.id, **table_in.model_dump())
    db.add(table)
    await db.flush()  # id is needed for the QR payload
    table.qr_code_url = qr_payload(settings.PUBLIC_ORIGIN, tenant.slug, table.id)
    await db.commit()
    await db.refresh(table)
    return table


async def update_table(db: AsyncSession, tenant_id: str, table_id: str, table_in: TableUpdate) -> RestaurantTable:
    table = await get_table_or_404(db, tenant_id, table_id)
    for key, value in table_in.model_dump(exclude_unset=True).items():
        setattr(table, key, value)
    await db.commit()
    await db.refresh(table)
    return table
