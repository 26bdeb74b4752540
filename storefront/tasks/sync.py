# storefront/tasks/sync.py
from storefront.celery_worker import celery_app
from storefront.services.task_service import TaskService, build_task_service
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# jeden serwis (i jedna flaga single-flight) na proces workera
_task_service: TaskService | None = None


def get_task_service() -> TaskService:
    global _task_service
    if _task_service is None:
        _task_service = build_task_service()
    return _task_service


@celery_app.task(name="storefront.tasks.sync.sync_products_task")
def sync_products_task():
    logger.info("Sync products task started")
    return get_task_service().handle_product_sync()


@celery_app.task(name="storefront.tasks.sync.cleanup_sync_logs_task")
def cleanup_sync_logs_task():
    logger.info("Cleanup sync logs task started")
    return {"deleted": get_task_service().handle_log_cleanup()}
