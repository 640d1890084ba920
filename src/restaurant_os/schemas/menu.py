from pydantic import BaseModel, Field, condecimal
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from .tenant import PublicTenantRead
from .table import TableRead


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    description: Optional[str] = None
    display_order: int = 0
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    description: Optional[str] = None
    display_order: Optional[int] = None
    is_active: Optional[bool] = None

    class Config:
        extra = "forbid"


class CategoryRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    display_order: int
    is_active: bool

    class Config:
        from_attributes = True


class MenuItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    price: condecimal(ge=0, max_digits=10, decimal_places=2)
    category_id: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_available: bool = True
    is_featured: bool = False
    display_order: int = 0


class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    price: Optional[condecimal(ge=0, max_digits=10, decimal_places=2)] = None
    category_id: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_available: Optional[bool] = None
    is_featured: Optional[bool] = None
    display_order: Optional[int] = None

    class Config:
        extra = "forbid"


class MenuItemRead(BaseModel):
    id: str
    category_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    price: Decimal
    image_url: Optional[str] = None
    is_available: bool
    is_featured: bool
    display_order: int
    created_at: datetime

    class Config:
        from_attributes = True


class PublicCategoryRead(CategoryRead):
    items: List[MenuItemRead] = []


class PublicMenuRead(BaseModel):
    tenant: PublicTenantRead
    categories: List[PublicCategoryRead]
    uncategorized: List[MenuItemRead] = []
    table: Optional[TableRead] = None
