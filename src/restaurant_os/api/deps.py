import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException, Path
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.api.errors import to_http_exception
from restaurant_os.config import settings
from restaurant_os.crud.tenant import get_accessible_tenant
from restaurant_os.db.session import get_async_session
from restaurant_os.exceptions import RestaurantOSError
from restaurant_os.models import Tenant


async def require_super_admin(x_admin_token: Optional[str] = Header(None)) -> None:
    if not x_admin_token or not secrets.compare_digest(x_admin_token, settings.SUPER_ADMIN_TOKEN):
        raise HTTPException(status_code=403, detail="Access denied")


async def get_tenant_scope(
    tenant_id: str = Path(..., description="Tenant ID"),
    db: AsyncSession = Depends(get_async_session),
) -> Tenant:
    """Tenant the request is scoped to; deactivated tenants lose dashboard access."""
    try:
        return await get_accessible_tenant(db, tenant_id)
    except RestaurantOSError as e:
        raise to_http_exception(e)
