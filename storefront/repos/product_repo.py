# storefront/repos/product_repo.py
import json
from typing import List, Tuple

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.orm import Session, joinedload

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.domain.schemas import ProductQuery


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_active(self, product_id: int) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.is_active.is_(True))
            .options(joinedload(ProductModel.category))
        ).scalar_one_or_none()

    def get_by_external_id(self, external_id: int) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.external_id == external_id)
        ).scalar_one_or_none()

    def add(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def _filters(self, query: ProductQuery) -> list:
        conditions = [ProductModel.is_active.is_(True)]

        if query.search:
            # %, _ z zapytania dopasowywane doslownie
            conditions.append(
                or_(
                    ProductModel.title.icontains(query.search, autoescape=True),
                    ProductModel.description.icontains(query.search, autoescape=True),
                    # caly tag, serializowany jak kolumna JSON (json.dumps, \uXXXX)
                    cast(ProductModel.tags, String).contains(json.dumps(query.search), autoescape=True),
                )
            )

        if query.category:
            conditions.append(ProductModel.category.has(CategoryModel.slug == query.category))

        if query.min_price is not None:
            conditions.append(ProductModel.price >= query.min_price)
        if query.max_price is not None:
            conditions.append(ProductModel.price <= query.max_price)

        if query.brand:
            conditions.append(ProductModel.brand.icontains(query.brand, autoescape=True))

        if query.in_stock:
            conditions.append(ProductModel.stock > 0)

        return conditions

    def search(self, query: ProductQuery) -> Tuple[List[ProductModel], int]:
        conditions = self._filters(query)

        column = getattr(ProductModel, query.sort_by)
        order = column.asc() if query.sort_order == "asc" else column.desc()

        products = self.db.execute(
            select(ProductModel)
            .where(*conditions)
            .options(joinedload(ProductModel.category))
            .order_by(order, ProductModel.id.asc())
            .offset((query.page - 1) * query.limit)
            .limit(query.limit)
        ).scalars().all()

        total = self.db.execute(
            select(func.count()).select_from(ProductModel).where(*conditions)
        ).scalar_one()

        return list(products), total
