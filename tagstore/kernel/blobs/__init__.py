"""
Blob storage backing Image-type records.
"""

from tagstore.kernel.blobs.blob_store import (
    BlobStore,
    FileSystemBlobStore,
    ImagePayload,
    image_extension,
    image_file_name,
)

__all__ = [
    "BlobStore",
    "FileSystemBlobStore",
    "ImagePayload",
    "image_extension",
    "image_file_name",
]
