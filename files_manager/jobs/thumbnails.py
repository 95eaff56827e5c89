"""Thumbnail generation for uploaded images."""

import io
import logging
from typing import List

from PIL import Image
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from files_manager.errors import FileNotFound, MissingFileId, MissingUserId
from files_manager.files.models import File, FileType
from files_manager.files.storage import THUMBNAIL_WIDTHS, BlobStore, variant_path

log = logging.getLogger(__name__)


def make_thumbnail(data: bytes, width: int) -> bytes:
    """Resize image bytes to width, keeping aspect ratio and the source format."""
    with Image.open(io.BytesIO(data)) as img:
        fmt = img.format if img.format in Image.SAVE else "PNG"
        w, h = img.size
        height = max(1, round(h * width / w))
        resized = img.resize((width, height), Image.Resampling.LANCZOS)
    # JPEG has no alpha or palette
    if fmt == "JPEG" and resized.mode not in ("RGB", "L"):
        resized = resized.convert("RGB")
    out = io.BytesIO()
    resized.save(out, format=fmt)
    return out.getvalue()


async def process_thumbnail_job(
    session: AsyncSession,
    blobs: BlobStore,
    user_id: str,
    file_id: str,
) -> List[str]:
    """
    Write the 500, 250 and 100 wide variants of an image next to its original.

    Existing variants are overwritten. Any failure propagates to the job runner;
    variants already written by this run are left in place.
    """
    if not file_id:
        raise MissingFileId()
    if not user_id:
        raise MissingUserId()
    result = await session.execute(
        select(File).where(File.id == file_id, File.user_id == user_id)
    )
    file = result.scalar_one_or_none()
    if not file or file.type != FileType.IMAGE.value or not file.local_path:
        raise FileNotFound(file_id)

    original = blobs.read(file.local_path)
    written = []
    for width in THUMBNAIL_WIDTHS:
        path = variant_path(file.local_path, width)
        blobs.write(path, make_thumbnail(original, width))
        log.info("Thumbnail written file=%s width=%d path=%s", file_id, width, path)
        written.append(path)
    return written
