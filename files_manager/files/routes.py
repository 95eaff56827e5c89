"""File API routes: upload, show, publish/unpublish, content."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Body, Depends, Query, Request, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from files_manager.auth.dependencies import get_current_user_id, get_optional_user_id
from files_manager.db.session import get_db
from files_manager.errors import NotFound
from files_manager.files import service
from files_manager.files.models import FileCreate, FileOut
from files_manager.files.storage import BlobStore, get_blob_store
from files_manager.jobs.queue import JobQueue, get_job_queue
from files_manager.limiter import limiter

router = APIRouter(prefix="/files", tags=["files"])
log = logging.getLogger(__name__)


@router.post("", response_model=FileOut, status_code=status.HTTP_201_CREATED)
@limiter.limit("600/minute")
async def upload(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    session: Annotated[AsyncSession, Depends(get_db)],
    blobs: Annotated[BlobStore, Depends(get_blob_store)],
    queue: Annotated[JobQueue, Depends(get_job_queue)],
    payload: Annotated[Optional[FileCreate], Body()] = None,
) -> FileOut:
    """
    Create a file, image or folder. Body: name, type, parentId, isPublic and
    base64 data (not for folders). Images get thumbnails generated in the background.
    """
    # no body is reported as the first missing field
    file = await service.create_file(session, blobs, queue, user_id, payload or FileCreate())
    return FileOut.from_file(file)


@router.get("/{file_id}", response_model=FileOut)
async def show(
    file_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    session: Annotated[AsyncSession, Depends(get_db)],
) -> FileOut:
    """Return one of the caller's files."""
    file = await service.get_owned_file(session, user_id, file_id)
    if not file:
        raise NotFound()
    return FileOut.from_file(file)


@router.put("/{file_id}/publish", response_model=FileOut)
async def publish(
    file_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    session: Annotated[AsyncSession, Depends(get_db)],
) -> FileOut:
    """Make a file public."""
    file = await service.set_visibility(session, user_id, file_id, True)
    return FileOut.from_file(file)


@router.put("/{file_id}/unpublish", response_model=FileOut)
async def unpublish(
    file_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    session: Annotated[AsyncSession, Depends(get_db)],
) -> FileOut:
    """Make a file private."""
    file = await service.set_visibility(session, user_id, file_id, False)
    return FileOut.from_file(file)


@router.get("/{file_id}/data")
async def get_data(
    file_id: str,
    user_id: Annotated[Optional[str], Depends(get_optional_user_id)],
    session: Annotated[AsyncSession, Depends(get_db)],
    blobs: Annotated[BlobStore, Depends(get_blob_store)],
    size: Annotated[Optional[str], Query()] = None,
) -> FileResponse:
    """
    Stream a file's content. Query param size (100, 250 or 500) selects a thumbnail.
    X-Token is only needed for private files.
    """
    path, mime_type = await service.resolve_content(session, blobs, file_id, user_id, size)
    log.info("get_data file=%s size=%s user=%s", file_id, size, user_id)
    return FileResponse(path=path, media_type=mime_type)
