"""Blob store: flat directory of raw file bytes named by random id.

Derived thumbnails sit next to their original as ``<original>_<width>``.
"""

import logging
import uuid
from pathlib import Path
from typing import Union

from files_manager.config import get_settings

log = logging.getLogger(__name__)

# Widths of the derived image variants, largest first
THUMBNAIL_WIDTHS = (500, 250, 100)


def variant_path(local_path: Union[str, Path], width: int) -> str:
    """Blob key of the width-resized variant of local_path."""
    return f"{local_path}_{width}"


class BlobStore:
    """Byte storage under one root directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def ensure_root(self) -> None:
        """Create the root directory (recursively) if missing."""
        self.root.mkdir(parents=True, exist_ok=True)

    def put(self, data: bytes) -> str:
        """Write data under a fresh random name; return its path."""
        self.ensure_root()
        target = self.root / str(uuid.uuid4())
        target.write_bytes(data)
        log.debug("Stored blob %s size=%d", target, len(data))
        return str(target)

    def write(self, path: Union[str, Path], data: bytes) -> None:
        """Write data at an explicit path, replacing what is there."""
        Path(path).write_bytes(data)

    def delete(self, path: Union[str, Path]) -> None:
        """Remove the blob at path if present."""
        Path(path).unlink(missing_ok=True)
        log.debug("Removed blob %s", path)

    def read(self, path: Union[str, Path]) -> bytes:
        """Return the bytes at path. Raises FileNotFoundError if absent."""
        return Path(path).read_bytes()

    def exists(self, path: Union[str, Path]) -> bool:
        p = Path(path)
        return p.exists() and p.is_file()


def get_blob_store() -> BlobStore:
    """Blob store rooted at the configured storage path (FastAPI dependency)."""
    return BlobStore(get_settings().storage_base_path)
