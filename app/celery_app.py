from celery import Celery
from celery.schedules import crontab
from celery.signals import setup_logging

from app.core.config import settings
from app.core.logging import configure_logging

celery_app = Celery(
    "studio_membership",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["app.tasks.enforcement_tasks"]
)

celery_app.conf.update(
    timezone="UTC",
    enable_utc=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
)

# Daily membership enforcement; run `celery -A app.celery_app beat` alongside the worker
celery_app.conf.beat_schedule = {
    "enforce-studio-memberships": {
        "task": "enforce_studio_memberships",
        "schedule": crontab(hour=settings.ENFORCEMENT_CRON_HOUR, minute=settings.ENFORCEMENT_CRON_MINUTE),
    },
}


@setup_logging.connect
def _configure_worker_logging(**kwargs):
    configure_logging()
