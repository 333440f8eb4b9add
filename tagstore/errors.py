"""
Typed error kinds raised by the kernel.

Repositories and identity services raise these instead of leaking
SQLAlchemy or OS errors. The API layer maps each kind to an HTTP status
(see tagstore.main).
"""

from fastapi import status


class TagstoreError(Exception):
    """Base class for every error the kernel raises on purpose."""

    kind: str = "error"
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"detail": self.message, "code": self.kind}


class InvalidArgument(TagstoreError):
    """Malformed or out-of-range input (bad record type, unparseable id)."""

    kind = "invalid_argument"
    http_status = status.HTTP_400_BAD_REQUEST


class Conflict(TagstoreError):
    """Uniqueness violation (username, project title)."""

    kind = "conflict"
    http_status = status.HTTP_409_CONFLICT


class NotFound(TagstoreError):
    """Unknown id or username."""

    kind = "not_found"
    http_status = status.HTTP_404_NOT_FOUND


class Unauthorized(TagstoreError):
    """Session token missing, expired or superseded."""

    kind = "unauthorized"
    http_status = status.HTTP_401_UNAUTHORIZED


class WrongPassword(Unauthorized):
    """Password does not match the stored one."""

    kind = "wrong_password"


class BlobStoreError(TagstoreError):
    """The blob store failed to write or read an image payload."""

    kind = "io_error"
    http_status = status.HTTP_502_BAD_GATEWAY
