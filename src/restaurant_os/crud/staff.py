import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.exceptions import ConflictError, NotFoundError
from restaurant_os.models import Shift, StaffUser
from restaurant_os.schemas.staff import StaffCreate, StaffUpdate

logger = logging.getLogger(__name__)


async def get_staff(db: AsyncSession, tenant_id: str, active_only: bool = False) -> List[StaffUser]:
    stmt = select(StaffUser).where(StaffUser.tenant_id == tenant_id).order_by(StaffUser.created_at.desc())
    if active_only:
        stmt = stmt.where(StaffUser.is_active.is_(True))
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_staff_member_or_404(db: AsyncSession, tenant_id: str, staff_id: str) -> StaffUser:
    staff = await db.get(StaffUser, staff_id)
    if not staff or staff.tenant_id != tenant_id:
        raise NotFoundError(f"Staff member with id={staff_id} not found")
    return staff


async def create_staff(db: AsyncSession, tenant_id: str, staff_in: StaffCreate) -> StaffUser:
    staff = StaffUser(tenant_id=tenant_id, **staff_in.model_dump())
    db.add(staff)
    await db.commit()
    await db.refresh(staff)
    logger.info("Staff member %s (%s) added to tenant %s", staff.id, staff.role.value, tenant_id)
    return staff


async def update_staff(db: AsyncSession, tenant_id: str, staff_id: str, staff_in: StaffUpdate) -> StaffUser:
    staff = await get_staff_member_or_404(db, tenant_id, staff_id)
    for key, value in staff_in.model_dump(exclude_unset=True).items():
        setattr(staff, key, value)
    await db.commit()
    await db.refresh(staff)
    return staff


async def delete_staff(db: AsyncSession, tenant_id: str, staff_id: str) -> None:
    """Staff with recorded shifts keep their row; deactivate them instead."""
    staff = await get_staff_member_or_404(db, tenant_id, staff_id)
    has_shifts = (await db.execute(select(Shift.id).where(Shift.staff_user_id == staff_id).limit(1))).first()
    if has_shifts:
        raise ConflictError("Staff member has recorded shifts; deactivate instead")
    await db.delete(staff)
    await db.commit()
