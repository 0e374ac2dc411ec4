from __future__ import annotations

from celery.utils.log import get_task_logger

from confirmaai.db.session import SessionLocal
from confirmaai.jobs.celery_app import celery_app
from confirmaai.services.scheduler import run_scheduler_jobs

logger = get_task_logger(__name__)


@celery_app.task(name="jobs.run_scheduler_jobs")
def run_scheduler() -> dict[str, int]:
    """Send due confirmations and reminders, then flag no-shows."""

    session = SessionLocal()
    try:
        summary = run_scheduler_jobs(session)
    finally:
        session.close()

    logger.info(
        "Scheduler run: %s confirmations, %s reminders, %s no-shows, %s failures",
        summary["confirmations_sent"],
        summary["reminders_sent"],
        summary["no_shows_marked"],
        summary["failures"],
    )
    return summary
