import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.config import settings
from restaurant_os.exceptions import AccessDeniedError, NotFoundError
from restaurant_os.models import Tenant
from restaurant_os.schemas.tenant import BrandingUpdate, TenantCreate, TenantUpdate
from restaurant_os.services.identifiers import slugify_restaurant_name

logger = logging.getLogger(__name__)

BRANDING_FIELDS = ("logo_url", "primary_color", "secondary_color", "accent_color", "description")


async def _slug_taken(db: AsyncSession, slug: str) -> bool:
    result = await db.execute(select(Tenant.id).where(Tenant.slug == slug))
    return result.first() is not None


async def unique_slug(db: AsyncSession, name: str) -> str:
    base = slugify_restaurant_name(name)
    slug, n = base, 1
    while await _slug_taken(db, slug):
        n += 1
        slug = f"{base}-{n}"
    return slug


async def create_tenant(db: AsyncSession, tenant_in: TenantCreate) -> Tenant:
    data = tenant_in.model_dump()
    data["currency"] = data.get("currency") or settings.DEFAULT_CURRENCY
    tenant = Tenant(slug=await unique_slug(db, tenant_in.name), **data)
    db.add(tenant)
    await db.commit()
    await db.refresh(tenant)
    logger.info("Tenant %s created with slug '%s'", tenant.id, tenant.slug)
    return tenant


async def get_tenants(db: AsyncSession, is_active: Optional[bool] = None) -> List[Tenant]:
    stmt = select(Tenant).order_by(Tenant.created_at.desc())
    if is_active is not None:
        stmt = stmt.where(Tenant.is_active == is_active)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_tenant(db: AsyncSession, tenant_id: str) -> Optional[Tenant]:
    return await db.get(Tenant, tenant_id)


async def get_tenant_or_404(db: AsyncSession, tenant_id: str) -> Tenant:
    tenant = await get_tenant(db, tenant_id)
    if not tenant:
        raise NotFoundError(f"Tenant with id={tenant_id} not found")
    return tenant


async def get_accessible_tenant(db: AsyncSession, tenant_id: str) -> Tenant:
    """Tenant for a dashboard request; deactivated tenants are refused."""
    tenant = await get_tenant_or_404(db, tenant_id)
    if not tenant.is_active:
        logger.warning("Dashboard access refused for inactive tenant %s", tenant_id)
        raise AccessDeniedError(f"Tenant {tenant_id} is deactivated")
    return tenant


async def get_active_tenant_by_slug(db: AsyncSession, slug: str) -> Optional[Tenant]:
    result = await db.execute(select(Tenant).where(Tenant.slug == slug, Tenant.is_active.is_(True)))
    return result.scalars().first()


async def update_tenant(db: AsyncSession, tenant_id: str, tenant_in: TenantUpdate) -> Tenant:
    tenant = await get_tenant_or_404(db, tenant_id)
    for key, value in tenant_in.model_dump(exclude_unset=True).items():
        setattr(tenant, key, value)
    await db.commit()
    await db.refresh(tenant)
    return tenant


async def set_tenant_active(db: AsyncSession, tenant_id: str, is_active: bool) -> Tenant:
    tenant = await get_tenant_or_404(db, tenant_id)
    tenant.is_active = is_active
    await db.commit()
    await db.refresh(tenant)
    logger.info("Tenant %s %s", tenant_id, "activated" if is_active else "deactivated")
    return tenant


def preview_branding(tenant: Tenant, branding_in: BrandingUpdate) -> dict:
    """Saved branding overlaid with the unsaved changes; nothing is written."""
    current = {key: getattr(tenant, key) for key in BRANDING_FIELDS}
    current.update(branding_in.model_dump(exclude_unset=True))
    return current


async def update_branding(db: AsyncSession, tenant_id: str, branding_in: BrandingUpdate) -> Tenant:
    tenant = await get_tenant_or_404(db, tenant_id)
    for key, value in branding_in.model_dump(exclude_unset=True).items():
        setattr(tenant, key, value)
    await db.commit()
    await db.refresh(tenant)
    return tenant
