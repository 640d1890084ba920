from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.api.deps import get_tenant_scope
from restaurant_os.api.errors import to_http_exception
from restaurant_os.crud import shift as crud_shift
from restaurant_os.db.session import get_async_session
from restaurant_os.exceptions import RestaurantOSError
from restaurant_os.models import ShiftStatusEnum, Tenant
from restaurant_os.schemas.shift import ShiftClose, ShiftOpen, ShiftRead


router = APIRouter(prefix="/tenants/{tenant_id}/shifts", tags=["shifts"])


@router.get("/", response_model=List[ShiftRead])
async def list_shifts(
    status: Optional[ShiftStatusEnum] = Query(None, description="Filter by status"),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    return await crud_shift.get_shifts(db, tenant.id, status=status)


@router.get("/current", response_model=Optional[ShiftRead])
async def current_shift(
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    """
    The open shift, or null when the till is closed.
    """
    return await crud_shift.get_current_shift(db, tenant.id)


@router.post("/", response_model=ShiftRead, status_code=201)
async def open_shift_endpoint(
    shift_in: ShiftOpen,
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Opens a shift. Returns 409 while another shift is still open.
    """
    try:
        return await crud_shift.open_shift(db, tenant.id, shift_in)
    except RestaurantOSError as e:
        raise to_http_exception(e)


@router.post("/{shift_id}/close", response_model=ShiftRead)
async def close_shift_endpoint(
    close_in: ShiftClose,
    shift_id: str = Path(..., description="Shift ID"),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Closes the shift and fills in its sales totals from the payments taken during it.
    """
    try:
        return await crud_shift.close_shift(db, tenant.id, shift_id, close_in)
    except RestaurantOSError as e:
        raise to_http_exception(e)
