from typing import List

from fastapi import APIRouter, Depends, Path, Response
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_os.api.deps import get_tenant_scope
from restaurant_os.api.errors import to_http_exception
from restaurant_os.crud import menu as crud_menu
from restaurant_os.db.session import get_async_session
from restaurant_os.exceptions import RestaurantOSError
from restaurant_os.models import Tenant
from restaurant_os.schemas.menu import (
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    MenuItemCreate,
    MenuItemRead,
    MenuItemUpdate,
)


router = APIRouter(prefix="/tenants/{tenant_id}/menu", tags=["menu"])


@router.get("/categories", response_model=List[CategoryRead])
async def list_categories(
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    return await crud_menu.get_categories(db, tenant.id)


@router.post("/categories", response_model=CategoryRead, status_code=201)
async def create_category(
    category_in: CategoryCreate,
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    return await crud_menu.create_category(db, tenant.id, category_in)


@router.patch("/categories/{category_id}", response_model=CategoryRead)
async def patch_category(
    category_in: CategoryUpdate,
    category_id: str = Path(...),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await crud_menu.update_category(db, tenant.id, category_id, category_in)
    except RestaurantOSError as e:
        raise to_http_exception(e)


@router.delete("/categories/{category_id}", status_code=204)
async def remove_category(
    category_id: str = Path(...),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Deletes a category; its items stay on the menu uncategorized.
    """
    try:
        await crud_menu.delete_category(db, tenant.id, category_id)
    except RestaurantOSError as e:
        raise to_http_exception(e)
    return Response(status_code=204)


@router.get("/items", response_model=List[MenuItemRead])
async def list_items(
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    return await crud_menu.get_items(db, tenant.id)


@router.post("/items", response_model=MenuItemRead, status_code=201)
async def create_item(
    item_in: MenuItemCreate,
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await crud_menu.create_item(db, tenant.id, item_in)
    except RestaurantOSError as e:
        raise to_http_exception(e)


@router.patch("/items/{item_id}", response_model=MenuItemRead)
async def patch_item(
    item_in: MenuItemUpdate,
    item_id: str = Path(...),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Price changes apply to new orders only; placed orders keep their snapshot.
    """
    try:
        return await crud_menu.update_item(db, tenant.id, item_id, item_in)
    except RestaurantOSError as e:
        raise to_http_exception(e)


@router.delete("/items/{item_id}", status_code=204)
async def remove_item(
    item_id: str = Path(...),
    tenant: Tenant = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        await crud_menu.delete_item(db, tenant.id, item_id)
    except RestaurantOSError as e:
        raise to_http_exception(e)
    return Response(status_code=204)
