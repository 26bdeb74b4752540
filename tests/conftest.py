"""Shared fixtures: in-memory database, catalog fake, factories, API client."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["SYNC_TIMEZONE"] = "UTC"
os.environ["ADMIN_EMAIL"] = ""

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import storefront.data.models  # noqa: E402,F401
from storefront.api import create_app  # noqa: E402
from storefront.data.database import Base, SessionLocal, engine  # noqa: E402
from storefront.data.models import CategoryModel, ProductModel  # noqa: E402
from storefront.domain.catalog import CatalogCategory, CatalogPage  # noqa: E402
from storefront.domain.errors import UpstreamError  # noqa: E402
from storefront.domain.schemas import UserCreate  # noqa: E402
from storefront.services.sync_service import ProductSyncService  # noqa: E402
from storefront.services.task_service import TaskService  # noqa: E402
from storefront.services.user_service import UserService  # noqa: E402


def feed_product(external_id: int, category: str = "smartphones", **overrides) -> dict:
    """One record in the upstream (DummyJSON) shape."""
    record = {
        "id": external_id,
        "title": f"Product {external_id}",
        "description": f"Description of product {external_id}",
        "category": category,
        "price": 9.99 + external_id,
        "discountPercentage": 5.5,
        "rating": 4.2,
        "stock": 10 + external_id,
        "tags": ["sale", category],
        "brand": "Acme",
        "sku": f"SKU-{external_id}",
        "weight": 1.5,
        "dimensions": {"width": 1.0, "height": 2.0, "depth": 3.0},
        "warrantyInformation": "1 year warranty",
        "shippingInformation": "Ships in 2 days",
        "availabilityStatus": "In Stock",
        "reviews": [
            {
                "rating": 5,
                "comment": "Great",
                "date": "2024-05-23T08:56:21.618Z",
                "reviewerName": "Jane Doe",
                "reviewerEmail": "jane@example.com",
            }
        ],
        "returnPolicy": "30 days return policy",
        "minimumOrderQuantity": 1,
        "meta": {"barcode": "123", "qrCode": "https://example.com/qr.png"},
        "images": [f"https://cdn.example.com/{external_id}/1.png"],
        "thumbnail": f"https://cdn.example.com/{external_id}/thumb.png",
    }
    record.update(overrides)
    return record


class FakeCatalog:
    """In-memory stand-in for CatalogClient; records every page request."""

    def __init__(self, products=None, categories=None):
        self.products = list(products or [])
        self.categories = list(categories or [])
        self.page_calls = []
        self.category_calls = 0
        self.fail_categories = False
        self.fail_on_offset = None
        self.on_page = None

    def list_categories(self):
        self.category_calls += 1
        if self.fail_categories:
            raise UpstreamError("catalog unavailable")
        return [
            CatalogCategory(slug=c) if isinstance(c, str) else CatalogCategory(**c)
            for c in self.categories
        ]

    def list_products(self, limit, offset):
        self.page_calls.append(offset)
        if self.on_page:
            self.on_page(offset)
        if self.fail_on_offset is not None and offset == self.fail_on_offset:
            raise UpstreamError("catalog timed out")
        items = self.products[offset:offset + limit]
        return CatalogPage(items=items, total=len(self.products), offset=offset, limit=limit)


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def catalog():
    return FakeCatalog(
        products=[feed_product(i) for i in range(1, 6)],
        categories=[{"slug": "smartphones", "name": "Smartphones"}],
    )


@pytest.fixture
def sync_service(catalog):
    return ProductSyncService(catalog, SessionLocal, batch_size=30)


@pytest.fixture
def task_service(sync_service):
    return TaskService(sync_service, SessionLocal)


@pytest.fixture
def make_category(db):
    def _make(slug="smartphones", name="Smartphones", is_active=True):
        existing = db.query(CategoryModel).filter_by(slug=slug).one_or_none()
        if existing:
            return existing
        category = CategoryModel(name=name, slug=slug, is_active=is_active)
        db.add(category)
        db.commit()
        return category

    return _make


@pytest.fixture
def make_product(db, make_category):
    def _make(title="iPhone 15 Pro", price="999.99", stock=50, category=None, **kwargs):
        category = category or make_category()
        product = ProductModel(
            title=title,
            price=Decimal(price),
            stock=stock,
            category_id=category.id,
            thumbnail="https://example.com/thumb.jpg",
            **kwargs,
        )
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role="CUSTOMER"):
        counter["n"] += 1
        payload = UserCreate(
            email=f"user{counter['n']}@example.com",
            first_name="Test",
            last_name="User",
        )
        return UserService(db).register(payload, role=role)

    return _make


@pytest.fixture
def app(task_service):
    return create_app(task_service=task_service, scheduler_enabled=False)


@pytest.fixture
def client(app):
    return TestClient(app)


def auth(user) -> dict:
    return {"X-User-Id": str(user.id)}
