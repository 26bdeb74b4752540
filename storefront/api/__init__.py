# storefront/api/__init__.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.orm import sessionmaker

from storefront.api.errors import register_error_handlers
from storefront.api.routers import carts, categories, products, tasks, users
from storefront.api.routers.health import router as health_router
from storefront.data.database import SessionLocal
from storefront.services.catalog_client import CatalogClient
from storefront.services.task_service import TaskService, build_task_service
from storefront.utils.settings import SCHEDULER_ENABLED, SCHEDULER_POLL_SECONDS
from storefront.utils.ticker import Ticker


def create_app(
    catalog_client: CatalogClient | None = None,
    session_factory: sessionmaker = SessionLocal,
    task_service: TaskService | None = None,
    scheduler_enabled: bool = SCHEDULER_ENABLED,
) -> FastAPI:
    # jeden TaskService (i jedna flaga synchronizacji) na proces
    task_service = task_service or build_task_service(catalog_client, session_factory)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ticker = None
        if scheduler_enabled:
            ticker = Ticker(SCHEDULER_POLL_SECONDS, task_service.run_pending, name="scheduler")
            ticker.start()
        try:
            yield
        finally:
            if ticker:
                ticker.stop()

    app = FastAPI(title="Storefront Service", version="1.0.0", lifespan=lifespan)
    app.state.task_service = task_service

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(users.router)
    app.include_router(carts.router)
    app.include_router(products.router)
    app.include_router(categories.router)
    app.include_router(tasks.router)

    return app
