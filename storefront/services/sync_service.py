# storefront/services/sync_service.py
import re
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Dict

from sqlalchemy.orm import Session, sessionmaker

from storefront.data.database import SessionLocal
from storefront.data.models.product import ProductModel
from storefront.data.models.sync_run import SyncRunModel
from storefront.domain.catalog import ExternalProduct
from storefront.domain.errors import SyncAbortedError, SyncInProgressError, UpstreamError
from storefront.repos.product_repo import ProductRepo
from storefront.repos.sync_run_repo import SyncRunRepo
from storefront.services.catalog_client import CatalogClient
from storefront.services.category_service import CategoryService
from storefront.utils.schedule import utc_now
from storefront.utils.settings import SYNC_BATCH_SIZE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def capitalize_words(value: str) -> str:
    # "mens-shirts" -> "Mens-Shirts"
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), value)


class _Progress:
    def __init__(self):
        self.synchronized = 0
        self.errors = 0


class ProductSyncService:
    """
    Synchronizacja katalogu: kategorie, potem produkty stronami po batch_size.

    - single-flight: drugie wywolanie w trakcie biegu dostaje SyncInProgressError od razu
    - upsert produktu po external_id, blad pojedynczego rekordu liczony i logowany
    - blad pobierania kategorii/strony przerywa bieg (SyncAbortedError z licznikami)
    - kazdy bieg zapisywany w sync_runs (tylko audyt)

    Flaga jest lokalna dla procesu, nie chroni przed biegami z innych replik.
    """

    def __init__(
        self,
        catalog_client: CatalogClient,
        session_factory: sessionmaker = SessionLocal,
        batch_size: int = SYNC_BATCH_SIZE,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.client = catalog_client
        self.session_factory = session_factory
        self.batch_size = batch_size
        self.clock = clock
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def single_flight(self):
        if not self._lock.acquire(blocking=False):
            raise SyncInProgressError()
        try:
            yield
        finally:
            self._lock.release()

    def sync_all(self, trigger: str = "manual") -> Dict[str, int]:
        with self.single_flight():
            started = self.clock()
            progress = _Progress()
            logger.info("Product synchronization started", extra={"context": {"trigger": trigger}})

            db = self.session_factory()
            try:
                self._run(db, progress)
            except Exception as e:
                db.rollback()
                self._record(db, trigger, started, "FAILED", progress, str(e))
                logger.exception(
                    "Product synchronization failed",
                    extra={"context": {
                        "trigger": trigger,
                        "synchronized": progress.synchronized,
                        "errors": progress.errors,
                    }},
                )
                raise
            else:
                self._record(db, trigger, started, "SUCCESS", progress)
            finally:
                db.close()

        logger.info(
            f"Synchronization completed: {progress.synchronized} products synchronized, "
            f"{progress.errors} errors",
            extra={"context": {"trigger": trigger}},
        )
        return {"synchronized": progress.synchronized, "errors": progress.errors}

    def _run(self, db: Session, progress: _Progress):
        try:
            # kategorie zawsze przed pierwszym produktem
            self._sync_categories(db)

            offset = 0
            while True:
                page = self.client.list_products(limit=self.batch_size, offset=offset)

                if not page.items:
                    break

                # kolejnosc feedu zachowana w obrebie strony
                for raw in page.items:
                    try:
                        self._sync_product(db, raw)
                        db.commit()
                        progress.synchronized += 1
                    except Exception as e:
                        db.rollback()
                        progress.errors += 1
                        logger.error(
                            f"Error synchronizing product {raw.get('id')}: {e}",
                            extra={"context": {"external_id": raw.get("id"), "offset": offset}},
                        )

                offset += self.batch_size

                # krotsza strona = koniec feedu, total z odpowiedzi nie jest wiarygodny
                if len(page.items) < self.batch_size:
                    break
        except UpstreamError as e:
            raise SyncAbortedError(
                f"Synchronization aborted: {e.message}",
                synchronized=progress.synchronized,
                errors=progress.errors,
            ) from e

    def _sync_categories(self, db: Session):
        categories = self.client.list_categories()
        service = CategoryService(db)

        for category in categories:
            # tytulowanie tylko gdy feed podaje sam slug
            name = category.name or capitalize_words(category.slug)
            service.create_or_update(name, category.slug, f"Products in {name}")

        db.commit()
        logger.info(f"{len(categories)} categories synchronized")

    def _sync_product(self, db: Session, raw: Dict[str, Any]):
        record = ExternalProduct.model_validate(raw)
        categories = CategoryService(db)
        products = ProductRepo(db)

        category = categories.find_by_slug(record.category)
        if category is None or not category.is_active:
            name = capitalize_words(record.category)
            category = categories.create_or_update(name, record.category, f"Products in {name}")

        now = self.clock()
        columns = record.to_columns()
        product = products.get_by_external_id(record.id)

        if product:
            for key, value in columns.items():
                setattr(product, key, value)
            product.last_sync_at = now
            product.is_active = True
        else:
            products.add(
                ProductModel(
                    external_id=record.id,
                    category_id=category.id,
                    last_sync_at=now,
                    is_active=True,
                    **columns,
                )
            )

    def _record(
        self,
        db: Session,
        trigger: str,
        started: datetime,
        status: str,
        progress: _Progress,
        error_message: str | None = None,
    ):
        finished = self.clock()
        try:
            SyncRunRepo(db).record(
                SyncRunModel(
                    trigger=trigger,
                    status=status,
                    started_at=started,
                    finished_at=finished,
                    duration_ms=int((finished - started).total_seconds() * 1000),
                    synchronized=progress.synchronized,
                    errors=progress.errors,
                    error_message=error_message,
                    created_at=finished,
                )
            )
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to record sync run: {e}")
