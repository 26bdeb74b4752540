# storefront/api/routers/products.py
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_task_service, require_admin
from storefront.data.database import get_db
from storefront.domain.schemas import (
    Identity,
    ProductOut,
    ProductQuery,
    ProductsPageOut,
    SyncResultOut,
)
from storefront.services.product_service import ProductService
from storefront.services.task_service import TaskService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/", response_model=ProductsPageOut)
def list_products(
    query: Annotated[ProductQuery, Query()],
    db: Session = Depends(get_db),
):
    return ProductService(db).find_all(query)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return ProductService(db).get_by_id(product_id)


@router.post("/sync", response_model=SyncResultOut)
def sync_products(
    _: Identity = Depends(require_admin),
    tasks: TaskService = Depends(get_task_service),
):
    """
    Synchronizacja od razu, w trakcie innego biegu -> 409 SYNC_IN_PROGRESS.
    """
    return tasks.sync_service.sync_all(trigger="api")
