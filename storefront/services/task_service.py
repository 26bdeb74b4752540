# storefront/services/task_service.py
from datetime import datetime, timedelta
from typing import Any, Callable, Dict

from sqlalchemy.orm import sessionmaker

from storefront.data.database import SessionLocal
from storefront.domain.errors import SyncInProgressError
from storefront.repos.sync_run_repo import SyncRunRepo
from storefront.services.catalog_client import CatalogClient
from storefront.services.sync_service import ProductSyncService
from storefront.utils.schedule import IntervalSchedule, WeeklySchedule, utc_now
from storefront.utils.settings import LOG_RETENTION_DAYS, SYNC_INTERVAL_HOURS, SYNC_TIMEZONE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

IN_PROGRESS_MESSAGE = "Synchronization already in progress"


class TaskService:
    """
    Zadania okresowe:
    - synchronizacja produktow co SYNC_INTERVAL_HOURS
    - czyszczenie starych wpisow sync_runs raz w tygodniu (niedziela 2:00)
    plus reczne uruchomienie i status.

    run_pending() odpala zadania, ktorych slot minal wg wstrzyknietego zegara;
    wola go Ticker w procesie API albo celery beat.
    """

    def __init__(
        self,
        sync_service: ProductSyncService,
        session_factory: sessionmaker = SessionLocal,
        sync_schedule: IntervalSchedule | None = None,
        cleanup_schedule: WeeklySchedule | None = None,
        clock: Callable[[], datetime] = utc_now,
        retention_days: int = LOG_RETENTION_DAYS,
    ):
        self.sync_service = sync_service
        self.session_factory = session_factory
        self.sync_schedule = sync_schedule or IntervalSchedule(SYNC_INTERVAL_HOURS, SYNC_TIMEZONE)
        self.cleanup_schedule = cleanup_schedule or WeeklySchedule(6, 2, SYNC_TIMEZONE)
        self.clock = clock
        self.retention_days = retention_days

        now = self.clock()
        self.next_sync_at = self.sync_schedule.next_after(now)
        self.next_cleanup_at = self.cleanup_schedule.next_after(now)

    def run_pending(self):
        now = self.clock()

        if now >= self.next_sync_at:
            self.next_sync_at = self.sync_schedule.next_after(now)
            self.handle_product_sync()

        if now >= self.next_cleanup_at:
            self.next_cleanup_at = self.cleanup_schedule.next_after(now)
            self.handle_log_cleanup()

    def handle_product_sync(self) -> Dict[str, int] | None:
        try:
            return self.sync_service.sync_all(trigger="scheduled")
        except SyncInProgressError:
            logger.warning("Synchronization already in progress, skipping this run")
            return None
        except Exception as e:
            # zapisane w sync_runs przez sync_service, host zyje dalej
            logger.error(f"Scheduled synchronization failed: {e}")
            return None

    def handle_log_cleanup(self) -> int:
        cutoff = self.clock() - timedelta(days=self.retention_days)

        db = self.session_factory()
        try:
            deleted = SyncRunRepo(db).delete_older_than(cutoff)
        except Exception:
            db.rollback()
            logger.exception("Sync log cleanup failed")
            raise
        finally:
            db.close()

        logger.info(
            f"Sync log cleanup completed: {deleted} rows deleted",
            extra={"context": {"cutoff": cutoff.isoformat()}},
        )
        return deleted

    def run_manual_sync(self) -> Dict[str, Any]:
        if self.sync_service.is_running:
            return {"message": IN_PROGRESS_MESSAGE}

        logger.info("Running manual synchronization")
        try:
            result = self.sync_service.sync_all(trigger="manual")
        except SyncInProgressError:
            # wyscig miedzy sprawdzeniem flagi a startem
            return {"message": IN_PROGRESS_MESSAGE}

        return {"message": "Manual synchronization completed", "result": result}

    def get_status(self) -> Dict[str, Any]:
        return {
            "running": self.sync_service.is_running,
            "next_run_estimate": self.sync_schedule.next_after(self.clock()),
            "timezone": str(self.sync_schedule.tz),
            "schedule": self.sync_schedule.expression,
        }


def build_task_service(
    catalog_client: CatalogClient | None = None,
    session_factory: sessionmaker = SessionLocal,
) -> TaskService:
    sync_service = ProductSyncService(catalog_client or CatalogClient(), session_factory)
    return TaskService(sync_service, session_factory)
