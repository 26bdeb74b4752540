# storefront/domain/catalog.py
"""Typed view of the external catalog feed (DummyJSON shape)."""
from decimal import Decimal
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class Dimensions(BaseModel):
    width: float | None = None
    height: float | None = None
    depth: float | None = None


class Review(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    rating: float | None = None
    comment: str | None = None
    date: str | None = None
    reviewer_name: str | None = Field(default=None, alias="reviewerName")
    reviewer_email: str | None = Field(default=None, alias="reviewerEmail")


class ExternalProduct(BaseModel):
    """One product record of the feed. Unknown keys (meta, barcode...) are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    title: str
    description: str | None = None
    category: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    discount_percentage: float | None = Field(default=None, alias="discountPercentage")
    rating: float | None = None
    stock: int = Field(default=0, ge=0)
    tags: List[str] = Field(default_factory=list)
    brand: str | None = None
    sku: str | None = None
    weight: float | None = None
    dimensions: Dimensions | None = None
    warranty_information: str | None = Field(default=None, alias="warrantyInformation")
    shipping_information: str | None = Field(default=None, alias="shippingInformation")
    availability_status: str | None = Field(default=None, alias="availabilityStatus")
    reviews: List[Review] = Field(default_factory=list)
    return_policy: str | None = Field(default=None, alias="returnPolicy")
    minimum_order_quantity: int | None = Field(default=None, alias="minimumOrderQuantity")
    images: List[str] = Field(default_factory=list)
    thumbnail: str | None = None

    def to_columns(self) -> Dict[str, Any]:
        """Mutable product columns, JSON-ready."""
        return {
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "discount_percentage": self.discount_percentage,
            "rating": self.rating,
            "stock": self.stock,
            "brand": self.brand,
            "sku": self.sku,
            "weight": self.weight,
            "dimensions": self.dimensions.model_dump() if self.dimensions else None,
            "warranty_information": self.warranty_information,
            "shipping_information": self.shipping_information,
            "availability_status": self.availability_status,
            "reviews": [r.model_dump() for r in self.reviews],
            "return_policy": self.return_policy,
            "minimum_order_quantity": self.minimum_order_quantity,
            "images": list(self.images),
            "thumbnail": self.thumbnail,
            "tags": list(self.tags),
        }


class CatalogCategory(BaseModel):
    slug: str = Field(..., min_length=1)
    name: str | None = None


class CatalogPage(BaseModel):
    # surowe rekordy, walidowane pojedynczo w trakcie synchronizacji
    items: List[Dict[str, Any]]
    total: int
    offset: int
    limit: int
