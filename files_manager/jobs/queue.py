"""Job queue seam between the upload path and the thumbnail worker."""

import asyncio
import logging
from typing import Protocol

from files_manager.jobs.tasks import generate_thumbnails

log = logging.getLogger(__name__)


class JobQueue(Protocol):
    async def enqueue_thumbnails(self, user_id: str, file_id: str) -> None: ...


class CeleryJobQueue:
    """Publishes thumbnail jobs to the Celery broker."""

    async def enqueue_thumbnails(self, user_id: str, file_id: str) -> None:
        # delay() talks to the broker synchronously; keep it off the event loop
        result = await asyncio.to_thread(generate_thumbnails.delay, user_id, file_id)
        log.info("Enqueued thumbnail job %s user=%s file=%s", result.id, user_id, file_id)


def get_job_queue() -> JobQueue:
    """FastAPI dependency returning the job queue."""
    return CeleryJobQueue()
