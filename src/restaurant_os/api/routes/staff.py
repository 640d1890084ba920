from typing import List

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.api.deps import get_tenant_scope
from restaurant_os.api.errors import to_http_exception
from restaurant_os.crud import staff as crud_staff
from restaurant_os.db.session import get_async_session
from restaurant_os.exceptions import RestaurantOSError
from restaurant_os.models import Tenant
from restaurant_os.schemas.staff import StaffCreate, StaffRead, StaffUpdate


router = APIRouter(prefix="/tenants/{tenant_id}/staff", tags=["staff"])


@router.get("/", response_model=List[StaffRead])
async def list_staff(
    active_only: bool = Query(False, description="Only active staff members"),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    return await crud_staff.get_staff(db, tenant.id, active_only=active_only)


@router.post("/", response_model=StaffRead, status_code=201)
async def create_staff_member(
    staff_in: StaffCreate,
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    return await crud_staff.create_staff(db, tenant.id, staff_in)


@router.patch("/{staff_id}", response_model=StaffRead)
async def update_staff_member(
    staff_in: StaffUpdate,
    staff_id: str = Path(..., description="Staff member ID"),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await crud_staff.update_staff(db, tenant.id, staff_id, staff_in)
    except RestaurantOSError as e:
        raise to_http_exception(e)


@router.delete("/{staff_id}", status_code=204)
async def remove_staff_member(
    staff_id: str = Path(..., description="Staff member ID"),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Deletes a staff member. Members with recorded shifts return 409; deactivate them instead.
    """
    try:
        await crud_staff.delete_staff(db, tenant.id, staff_id)
    except RestaurantOSError as e:
        raise to_http_exception(e)
    return Response(status_code=204)
