from typing import List

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.api.deps import get_tenant_scope
from restaurant_os.api.errors import to_http_exception
from restaurant_os.crud.table import create_table, get_table_or_404, get_tables_with_orders, update_table
from restaurant_os.db.session import get_async_session
from restaurant_os.exceptions import RestaurantOSError
from restaurant_os.models import Tenant
from restaurant_os.schemas.table import TableCreate, TableRead, TableUpdate, TableWithOrder


router = APIRouter(prefix="/tenants/{tenant_id}/tables", tags=["tables"])


@router.get("/", response_model=List[TableWithOrder])
async def list_tables(
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Tables with their current open order, if any (occupied tables).
    """
    return await get_tables_with_orders(db, tenant.id)


@router.post("/", response_model=TableRead, status_code=201)
async def create_table_endpoint(
    table_in: TableCreate,
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Creates a table; its QR payload points at the public menu scoped to this table.
    """
    return await create_table(db, tenant, table_in)


@router.get("/{table_id}", response_model=TableRead)
async def get_table(
    table_id: str = Path(..., description="Table ID"),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await get_table_or_404(db, tenant.id, table_id)
    except RestaurantOSError as e:
        raise to_http_exception(e)


@router.patch("/{table_id}", response_model=TableRead)
async def patch_table(
    table_in: TableUpdate,
    table_id: str = Path(..., description="Table ID"),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await update_table(db, tenant.id, table_id, table_in)
    except RestaurantOSError as e:
        raise to_http_exception(e)
