# storefront/services/product_service.py
import math
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import ProductQuery
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def product_to_dict(p: ProductModel) -> Dict[str, Any]:
    return {
        "id": p.id,
        "external_id": p.external_id,
        "title": p.title,
        "description": p.description,
        "price": p.price,
        "discount_percentage": p.discount_percentage,
        "rating": p.rating,
        "stock": p.stock,
        "brand": p.brand,
        "sku": p.sku,
        "weight": p.weight,
        "dimensions": p.dimensions,
        "warranty_information": p.warranty_information,
        "shipping_information": p.shipping_information,
        "availability_status": p.availability_status,
        "reviews": p.reviews or [],
        "return_policy": p.return_policy,
        "minimum_order_quantity": p.minimum_order_quantity,
        "images": p.images or [],
        "thumbnail": p.thumbnail,
        "tags": p.tags or [],
        "is_active": p.is_active,
        "last_sync_at": p.last_sync_at,
        "created_at": p.created_at,
        "updated_at": p.updated_at,
        "category": {
            "id": p.category.id,
            "name": p.category.name,
            "slug": p.category.slug,
        },
    }


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def find_all(self, query: ProductQuery) -> Dict[str, Any]:
        try:
            products, total = self.repo.search(query)
        except Exception:
            logger.error("Failed to list products", extra={"context": query.model_dump()})
            raise

        total_pages = math.ceil(total / query.limit)

        return {
            "products": [product_to_dict(p) for p in products],
            "pagination": {
                "page": query.page,
                "limit": query.limit,
                "total": total,
                "total_pages": total_pages,
                "has_next": query.page < total_pages,
                "has_prev": query.page > 1,
            },
        }

    def get_by_id(self, product_id: int) -> Dict[str, Any]:
        product = self.repo.get_active(product_id)
        if not product:
            raise NotFoundError(f"Product {product_id} not found", {"product_id": product_id})
        return product_to_dict(product)
