from celery import Celery
from celery.schedules import crontab

from storefront.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    SYNC_INTERVAL_HOURS,
    SYNC_TIMEZONE,
)

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# WAŻNE: Explicite importuj taski, żeby Celery je zarejestrował
celery_app.conf.imports = ("storefront.tasks.sync",)

# domyslny harmonogram; Ticker w API (SCHEDULER_ENABLED=true) tylko bez beat
celery_app.conf.beat_schedule = {
    "sync-products": {
        "task": "storefront.tasks.sync.sync_products_task",
        "schedule": crontab(minute=0, hour=f"*/{SYNC_INTERVAL_HOURS}"),
    },
    "cleanup-sync-logs": {
        "task": "storefront.tasks.sync.cleanup_sync_logs_task",
        "schedule": crontab(minute=0, hour=2, day_of_week=0),
    },
}

celery_app.conf.timezone = SYNC_TIMEZONE
