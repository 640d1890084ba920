from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.api.deps import get_tenant_scope, require_super_admin
from restaurant_os.api.errors import to_http_exception
from restaurant_os.crud import tenant as crud_tenant
from restaurant_os.crud.analytics import get_order_analytics
from restaurant_os.db.session import get_async_session
from restaurant_os.exceptions import RestaurantOSError
from restaurant_os.models import Tenant
from restaurant_os.schemas.tenant import Branding, BrandingUpdate, TenantCreate, TenantRead, TenantUpdate


admin_router = APIRouter(
    prefix="/admin/tenants",
    tags=["admin"],
    dependencies=[Depends(require_super_admin)],
)

router = APIRouter(prefix="/tenants/{tenant_id}", tags=["tenants"])


@admin_router.post("/", response_model=TenantRead, status_code=201)
async def create_tenant_endpoint(tenant_in: TenantCreate, db: AsyncSession = Depends(get_async_session)):
    """
    Creates a restaurant account with a unique public slug.
    """
    return await crud_tenant.create_tenant(db, tenant_in)


@admin_router.get("/", response_model=List[TenantRead])
async def list_tenants(
    is_active: Optional[bool] = Query(None, description="Filter by active flag"),
    db: AsyncSession = Depends(get_async_session),
):
    return await crud_tenant.get_tenants(db, is_active=is_active)


@admin_router.patch("/{tenant_id}", response_model=TenantRead)
async def patch_tenant(
    tenant_in: TenantUpdate,
    tenant_id: str = Path(...),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await crud_tenant.update_tenant(db, tenant_id, tenant_in)
    except RestaurantOSError as e:
        raise to_http_exception(e)


@admin_router.post("/{tenant_id}/activate", response_model=TenantRead)
async def activate_tenant(tenant_id: str = Path(...), db: AsyncSession = Depends(get_async_session)):
    try:
        return await crud_tenant.set_tenant_active(db, tenant_id, True)
    except RestaurantOSError as e:
        raise to_http_exception(e)


@admin_router.post("/{tenant_id}/deactivate", response_model=TenantRead)
async def deactivate_tenant(tenant_id: str = Path(...), db: AsyncSession = Depends(get_async_session)):
    try:
        return await crud_tenant.set_tenant_active(db, tenant_id, False)
    except RestaurantOSError as e:
        raise to_http_exception(e)


@router.get("", response_model=TenantRead)
async def get_own_tenant(tenant: Tenant = Depends(get_tenant_scope)):
    return tenant


@router.patch("/branding", response_model=TenantRead)
async def patch_branding(
    branding_in: BrandingUpdate,
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    return await crud_tenant.update_branding(db, tenant.id, branding_in)


@router.post("/branding/preview", response_model=Branding)
async def preview_branding(
    branding_in: BrandingUpdate,
    tenant: Tenant = Depends(get_tenant_scope),
):
    """
    Branding as it would look with these changes applied. Nothing is saved.
    """
    return crud_tenant.preview_branding(tenant, branding_in)


@router.get("/analytics")
async def get_analytics(
    recent_days: int = Query(30, ge=1, le=365, description="Window for the recent_* figures"),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Order history analytics:
    - count_orders, total_revenue, average_order_value
    - orders_by_mode
    - recent_orders, recent_revenue
    """
    return await get_order_analytics(db, tenant.id, recent_days=recent_days)
