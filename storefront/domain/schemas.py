# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Any, Dict, List, Literal
from decimal import Decimal
from datetime import datetime


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="Product id (> 0)")
    quantity: int = Field(..., gt=0, description="Quantity to add (> 0)")


class ItemUpdateIn(BaseModel):
    """Nowa ilosc pozycji, 0 nie usuwa pozycji."""

    quantity: int = Field(..., gt=0, description="New quantity (> 0)")


class CategoryRef(BaseModel):
    id: int
    name: str
    slug: str


class CartProductOut(BaseModel):
    id: int
    title: str
    thumbnail: str | None = None
    stock: int
    category: CategoryRef


class CartItemOut(BaseModel):
    """Schema dla pozycji koszyka (response)."""

    id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    added_at: datetime
    product: CartProductOut


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    id: int
    user_id: int
    items: List[CartItemOut]
    total_items: int
    total_amount: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageOut(BaseModel):
    message: str
    items_removed: int | None = None


class UserCreate(BaseModel):
    """Schema dla rejestracji uzytkownika."""

    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class UserRead(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: str
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Identity(BaseModel):
    """Uwierzytelniony wywolujacy, przekazywany do serwisow jako id + rola."""

    id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"


class CategoryOut(BaseModel):
    id: int
    name: str
    slug: str
    description: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    product_count: int


SortField = Literal["title", "price", "rating", "created_at", "stock"]


class ProductQuery(BaseModel):
    """Filtry listy produktow (query string)."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    search: str | None = None
    category: str | None = None
    min_price: Decimal | None = Field(default=None, ge=0)
    max_price: Decimal | None = Field(default=None, ge=0)
    brand: str | None = None
    in_stock: bool | None = None
    sort_by: SortField = "created_at"
    sort_order: Literal["asc", "desc"] = "desc"

    @field_validator("search", "brand", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("category", mode="before")
    @classmethod
    def normalize_slug(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @field_validator("sort_by", mode="before")
    @classmethod
    def accept_camel_case(cls, v):
        return "created_at" if v == "createdAt" else v


class ProductOut(BaseModel):
    id: int
    external_id: int | None = None
    title: str
    description: str | None = None
    price: Decimal
    discount_percentage: float | None = None
    rating: float | None = None
    stock: int
    brand: str | None = None
    sku: str | None = None
    weight: float | None = None
    dimensions: Dict[str, Any] | None = None
    warranty_information: str | None = None
    shipping_information: str | None = None
    availability_status: str | None = None
    reviews: List[Dict[str, Any]] = Field(default_factory=list)
    return_policy: str | None = None
    minimum_order_quantity: int | None = None
    images: List[str] = Field(default_factory=list)
    thumbnail: str | None = None
    tags: List[str] = Field(default_factory=list)
    is_active: bool
    last_sync_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    category: CategoryRef


class PaginationOut(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class ProductsPageOut(BaseModel):
    products: List[ProductOut]
    pagination: PaginationOut


class SyncResultOut(BaseModel):
    synchronized: int
    errors: int


class ManualSyncOut(BaseModel):
    message: str
    result: SyncResultOut | None = None


class TaskStatusOut(BaseModel):
    running: bool
    next_run_estimate: datetime
    timezone: str
    schedule: str
