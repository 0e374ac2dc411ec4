from __future__ import annotations

from datetime import timedelta

from celery import Celery

from confirmaai.core.config import settings

celery_app = Celery(
    "confirmaai",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["confirmaai.jobs.tasks"],
)

celery_app.conf.timezone = settings.timezone
celery_app.conf.broker_connection_retry_on_startup = True
celery_app.conf.beat_schedule = {
    "run-scheduler-jobs": {
        "task": "jobs.run_scheduler_jobs",
        "schedule": timedelta(minutes=settings.scheduler_interval_minutes),
    },
}
