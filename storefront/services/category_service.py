# storefront/services/category_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.domain.errors import NotFoundError
from storefront.repos.category_repo import CategoryRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _to_dict(category: CategoryModel, product_count: int) -> Dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
        "is_active": category.is_active,
        "created_at": category.created_at,
        "updated_at": category.updated_at,
        "product_count": product_count,
    }


class CategoryService:
    """Katalog kategorii, klucz biznesowy to slug."""

    def __init__(self, db: Session):
        self.repo = CategoryRepo(db)

    def find_all(self) -> List[Dict[str, Any]]:
        return [_to_dict(c, n) for c, n in self.repo.list_active_with_counts()]

    def get_by_slug(self, slug: str) -> Dict[str, Any]:
        row = self.repo.get_active_with_count(slug)
        if not row:
            raise NotFoundError(f"Category '{slug}' not found", {"slug": slug})
        return _to_dict(*row)

    def find_by_slug(self, slug: str) -> CategoryModel | None:
        return self.repo.get_by_slug(slug)

    def create_or_update(self, name: str, slug: str, description: str | None = None) -> CategoryModel:
        """Upsert po slugu; istniejaca kategoria dostaje nowa nazwe/opis i wraca do aktywnych."""
        category = self.repo.get_by_slug(slug)

        if category:
            category.name = name
            category.description = description
            category.is_active = True
        else:
            category = self.repo.add(
                CategoryModel(name=name, slug=slug, description=description, is_active=True)
            )

        logger.debug(f"Category synchronized: {name} ({slug})")
        return category
