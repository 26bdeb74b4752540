# storefront/repos/category_repo.py
from typing import List, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel


class CategoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def _with_counts(self):
        counts = (
            select(ProductModel.category_id, func.count(ProductModel.id).label("n"))
            .group_by(ProductModel.category_id)
            .subquery()
        )
        return select(CategoryModel, func.coalesce(counts.c.n, 0)).outerjoin(
            counts, counts.c.category_id == CategoryModel.id
        )

    def list_active_with_counts(self) -> List[Tuple[CategoryModel, int]]:
        rows = self.db.execute(
            self._with_counts()
            .where(CategoryModel.is_active.is_(True))
            .order_by(CategoryModel.name.asc())
        ).all()
        return [(row[0], row[1]) for row in rows]

    def get_active_with_count(self, slug: str) -> Tuple[CategoryModel, int] | None:
        row = self.db.execute(
            self._with_counts().where(
                CategoryModel.slug == slug,
                CategoryModel.is_active.is_(True),
            )
        ).first()
        return (row[0], row[1]) if row else None

    def get_by_slug(self, slug: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.slug == slug)
        ).scalar_one_or_none()

    def add(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.flush()
        return category
