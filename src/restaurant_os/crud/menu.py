from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.exceptions import NotFoundError
from restaurant_os.models import MenuCategory, MenuItem
from restaurant_os.schemas.menu import CategoryCreate, CategoryUpdate, MenuItemCreate, MenuItemUpdate


async def get_categories(db: AsyncSession, tenant_id: str, active_only: bool = False) -> List[MenuCategory]:
    stmt = (
        select(MenuCategory)
        .where(MenuCategory.tenant_id == tenant_id)
        .order_by(MenuCategory.display_order, MenuCategory.name)
    )
    if active_only:
        stmt = stmt.where(MenuCategory.is_active.is_(True))
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def _get_category(db: AsyncSession, tenant_id: str, category_id: str) -> MenuCategory:
    category = await db.get(MenuCategory, category_id)
    if not category or category.tenant_id != tenant_id:
        raise NotFoundError(f"Category with id={category_id} not found")
    return category


async def create_category(db: AsyncSession, tenant_id: str, category_in: CategoryCreate) -> MenuCategory:
    category = MenuCategory(tenant_id=tenant_id, **category_in.model_dump())
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category


async def update_category(
    db: AsyncSession, tenant_id: str, category_id: str, category_in: CategoryUpdate
) -> MenuCategory:
    category = await _get_category(db, tenant_id, category_id)
    for key, value in category_in.model_dump(exclude_unset=True).items():
        setattr(category, key, value)
    await db.commit()
    await db.refresh(category)
    return category


async def delete_category(db: AsyncSession, tenant_id: str, category_id: str) -> None:
    category = await _get_category(db, tenant_id, category_id)
    await db.delete(category)
    await db.commit()


async def get_items(db: AsyncSession, tenant_id: str, available_only: bool = False) -> List[MenuItem]:
    stmt = (
        select(MenuItem)
        .where(MenuItem.tenant_id == tenant_id)
        .order_by(MenuItem.display_order, MenuItem.name)
    )
    if available_only:
        stmt = stmt.where(MenuItem.is_available.is_(True))
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_items_by_ids(db: AsyncSession, tenant_id: str, item_ids: Iterable[str]) -> dict[str, MenuItem]:
    """Available items of the tenant, keyed by id. Unknown or unavailable ids are simply absent."""
    ids = list(set(item_ids))
    if not ids:
        return {}
    stmt = select(MenuItem).where(
        MenuItem.tenant_id == tenant_id,
        MenuItem.id.in_(ids),
        MenuItem.is_available.is_(True),
    )
    result = await db.execute(stmt)
    return {item.id: item for item in result.scalars().all()}


async def _get_item(db: AsyncSession, tenant_id: str, item_id: str) -> MenuItem:
    item = await db.get(MenuItem, item_id)
    if not item or item.tenant_id != tenant_id:
        raise NotFoundError(f"Menu item with id={item_id} not found")
    return item


async def create_item(db: AsyncSession, tenant_id: str, item_in: MenuItemCreate) -> MenuItem:
    if item_in.category_id:
        await _get_category(db, tenant_id, item_in.category_id)
    item = MenuItem(tenant_id=tenant_id, **item_in.model_dump())
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


async def update_item(db: AsyncSession, tenant_id: str, item_id: str, item_in: MenuItemUpdate) -> MenuItem:
    item = await _get_item(db, tenant_id, item_id)
    update_data = item_in.model_dump(exclude_unset=True)

    if update_data.get("category_id"):
        await _get_category(db, tenant_id, update_data["category_id"])

    for key, value in update_data.items():
        setattr(item, key, value)
    await db.commit()
    await db.refresh(item)
    return item


async def delete_item(db: AsyncSession, tenant_id: str, item_id: str) -> None:
    item = await _get_item(db, tenant_id, item_id)
    await db.delete(item)
    await db.commit()


async def get_public_menu(db: AsyncSession, tenant_id: str) -> tuple[List[MenuCategory], dict[Optional[str], List[MenuItem]]]:
    """Active categories and available items grouped by category id (None = uncategorized)."""
    categories = await get_categories(db, tenant_id, active_only=True)
    items = await get_items(db, tenant_id, available_only=True)

    items_by_category: dict[Optional[str], List[MenuItem]] = {}
    for item in items:
        items_by_category.setdefault(item.category_id, []).append(item)
    return categories, items_by_category
