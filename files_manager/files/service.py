"""File lifecycle, visibility and content resolution.

All lookups that act on behalf of a user are scoped by owner in the query itself,
and every ownership failure surfaces as NotFound.
"""

import base64
import binascii
import logging
import mimetypes
from datetime import datetime, timezone
from typing import Any, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from files_manager.errors import NotFound, ValidationFailed
from files_manager.files.models import CONTENT_TYPES, File, FileCreate, FileType
from files_manager.files.storage import THUMBNAIL_WIDTHS, BlobStore, variant_path
from files_manager.jobs.queue import JobQueue

log = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"
_VALID_TYPES = {t.value for t in FileType}
_VALID_SIZES = {str(w) for w in THUMBNAIL_WIDTHS}


def _normalize_parent_id(parent_id: Any) -> Optional[str]:
    """None for root (0, "0" or missing), else the parent id as a string."""
    if parent_id is None or parent_id is False or parent_id == 0 or parent_id == "0":
        return None
    return str(parent_id)


def _decode_data(data: str) -> bytes:
    try:
        return base64.b64decode(data)
    except (binascii.Error, ValueError):
        raise ValidationFailed("Invalid data")


async def get_file(session: AsyncSession, file_id: str) -> Optional[File]:
    """Return a file by id regardless of owner, or None."""
    return await session.get(File, file_id)


async def get_owned_file(session: AsyncSession, user_id: str, file_id: str) -> Optional[File]:
    """Return the file only if it exists and belongs to user_id."""
    result = await session.execute(
        select(File).where(File.id == file_id, File.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def count_files(session: AsyncSession) -> int:
    result = await session.execute(select(func.count()).select_from(File))
    return result.scalar_one()


async def create_file(
    session: AsyncSession,
    blobs: BlobStore,
    queue: JobQueue,
    user_id: str,
    payload: FileCreate,
) -> File:
    """
    Validate and persist a new file or folder for user_id.

    For file and image types the base64 data is decoded and written to the blob
    store before the record is inserted. The record is committed before a thumbnail
    job is enqueued for images; enqueue failures are logged and do not fail the call.
    """
    if not isinstance(payload.name, str) or not payload.name:
        raise ValidationFailed("Missing name")
    if not isinstance(payload.type, str) or payload.type not in _VALID_TYPES:
        raise ValidationFailed("Missing type")
    if payload.type != FileType.FOLDER.value and (
        not isinstance(payload.data, str) or not payload.data
    ):
        raise ValidationFailed("Missing data")

    parent_id = _normalize_parent_id(payload.parent_id)
    if parent_id is not None:
        parent = await get_file(session, parent_id)
        if not parent:
            raise ValidationFailed("Parent not found")
        if parent.type != FileType.FOLDER.value:
            raise ValidationFailed("Parent is not a folder")

    file = File(
        user_id=user_id,
        name=payload.name,
        type=payload.type,
        is_public=payload.is_public is True,
        parent_id=parent_id,
        created_at=datetime.now(timezone.utc),
    )
    if payload.type in CONTENT_TYPES:
        file.local_path = blobs.put(_decode_data(payload.data))

    session.add(file)
    try:
        await session.commit()
    except Exception:
        # the record is the only reference to the blob
        if file.local_path:
            blobs.delete(file.local_path)
        raise
    log.info(
        "Created %s id=%s user=%s name=%r", file.type, file.id, user_id, file.name
    )

    if file.type == FileType.IMAGE.value:
        try:
            await queue.enqueue_thumbnails(user_id, file.id)
        except Exception:
            log.warning(
                "Could not enqueue thumbnail job for file=%s", file.id, exc_info=True
            )
    return file


async def set_visibility(
    session: AsyncSession, user_id: str, file_id: str, is_public: bool
) -> File:
    """Publish or unpublish a file owned by user_id. Raises NotFound otherwise."""
    file = await get_owned_file(session, user_id, file_id)
    if not file:
        raise NotFound()
    file.is_public = is_public
    await session.commit()
    log.info("File id=%s is_public=%s (user=%s)", file.id, is_public, user_id)
    return file


async def resolve_content(
    session: AsyncSession,
    blobs: BlobStore,
    file_id: str,
    user_id: Optional[str],
    size: Optional[str] = None,
) -> Tuple[str, str]:
    """
    Return (blob path, mime type) of a file's content or one of its thumbnails.

    Private files are only visible to their owner; anyone else, including an
    anonymous caller, gets NotFound. A thumbnail that has not been generated yet
    is also NotFound.
    """
    if size is not None and size not in _VALID_SIZES:
        raise ValidationFailed("Invalid size")
    file = await get_file(session, file_id)
    if not file:
        raise NotFound()
    if file.type == FileType.FOLDER.value:
        raise ValidationFailed("A folder doesn't have content")
    if not file.is_public and (not user_id or user_id != file.user_id):
        raise NotFound()

    target = file.local_path if size is None else variant_path(file.local_path, int(size))
    if not target or not blobs.exists(target):
        raise NotFound()
    mime_type = mimetypes.guess_type(file.name)[0] or DEFAULT_MIME_TYPE
    return target, mime_type
