"""Celery tasks: thumbnail generation."""

import asyncio
import logging
from typing import List

from celery import Task

from files_manager.db.session import get_session
from files_manager.files.storage import get_blob_store
from files_manager.jobs.celery_app import celery_app
from files_manager.jobs.thumbnails import process_thumbnail_job

log = logging.getLogger(__name__)


class AsyncTask(Task):
    """Celery task that runs a coroutine in a fresh event loop."""

    def run_async(self, coro):
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            return loop.run_until_complete(coro)
        finally:
            asyncio.set_event_loop(None)
            loop.close()


@celery_app.task(bind=True, base=AsyncTask, name="files_manager.generate_thumbnails")
def generate_thumbnails(self, user_id: str, file_id: str) -> List[str]:
    """Generate the thumbnail variants of one image. Errors fail the task."""
    log.info("Thumbnail job start user=%s file=%s", user_id, file_id)
    written = self.run_async(_generate_thumbnails(user_id, file_id))
    log.info("Thumbnail job done file=%s variants=%d", file_id, len(written))
    return written


async def _generate_thumbnails(user_id: str, file_id: str) -> List[str]:
    async with get_session() as session:
        return await process_thumbnail_job(session, get_blob_store(), user_id, file_id)
