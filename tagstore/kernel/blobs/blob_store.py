"""
Blob storage for Image-type record input.

Records only keep the reference returned by ``put``; the bytes live in
the blob store.
"""

import asyncio
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from tagstore.errors import BlobStoreError, InvalidArgument
from tagstore.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImagePayload:
    """Binary image input as decoded by the transport."""
    
    data: bytes
    content_type: str


class BlobStore(Protocol):
    """Byte storage keyed by reference."""
    
    async def put(self, key: str, data: bytes) -> str:
        """Store ``data`` under ``key`` and return its reference."""
        ...
    
    async def delete(self, reference: str) -> None:
        """Remove a stored blob. Missing blobs are not an error."""
        ...


def image_extension(content_type: str) -> str:
    """
    File extension (with dot) for a MIME type.
    
    Raises:
        InvalidArgument: If the content type has no known file extension
    """
    extension = mimetypes.guess_extension(content_type.split(";")[0].strip())
    if not extension:
        raise InvalidArgument(f"Unsupported image content type '{content_type}'")
    return extension


def image_file_name(record_id: int, extension: str, stamp_ms: int) -> str:
    """Blob key for an image record: ``img_<record id>_<epoch ms><ext>``."""
    return f"img_{record_id}_{stamp_ms}{extension}"


class FileSystemBlobStore:
    """Stores blobs as files under a root directory; the reference is the file name."""
    
    def __init__(self, root: str | Path):
        self.root = Path(root)
    
    def path_for(self, reference: str) -> Path:
        path = (self.root / reference).resolve()
        if self.root.resolve() not in path.parents:
            raise InvalidArgument(f"Blob reference '{reference}' escapes the blob root")
        return path
    
    async def put(self, key: str, data: bytes) -> str:
        path = self.path_for(key)
        try:
            await asyncio.to_thread(_write_file, path, data)
        except OSError as e:
            raise BlobStoreError(f"Could not write blob '{key}': {e}") from e
        logger.debug("Blob written", extra={"blob": key, "size": len(data)})
        return key
    
    async def delete(self, reference: str) -> None:
        path = self.path_for(reference)
        try:
            await asyncio.to_thread(path.unlink, True)
        except OSError as e:
            raise BlobStoreError(f"Could not delete blob '{reference}': {e}") from e
        logger.debug("Blob deleted", extra={"blob": reference})


def _write_file(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
