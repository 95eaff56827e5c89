"""Celery application for the thumbnail worker.

Run with: celery -A files_manager.jobs.celery_app worker
"""

from celery import Celery
from celery.signals import after_setup_logger

from files_manager.config import get_settings
from files_manager.logging_setup import setup_logging

settings = get_settings()

celery_app = Celery(
    "files_manager",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "files_manager.jobs.tasks",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    # At-least-once: ack after the job finished, requeue if the worker dies
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
    result_expires=86400,  # 24 hours
    broker_connection_retry_on_startup=True,
)


@after_setup_logger.connect
def _configure_logging(**kwargs) -> None:
    setup_logging()
