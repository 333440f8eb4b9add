"""
FastAPI dependencies for sessions, store handles and the current user.

The kernel handles (locks, token service, blob store) are built once with
the app and live on ``app.state``; each request gets repositories bound
to its own database session.
"""

from typing import Annotated, Optional

from fastapi import Depends, Path, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from tagstore.database import get_db
from tagstore.kernel.blobs.blob_store import BlobStore
from tagstore.kernel.events.event_store import EventStore
from tagstore.kernel.identity.identity_service import IdentityService
from tagstore.kernel.identity.token import SessionToken, TokenService
from tagstore.kernel.locks import KeyedLocks
from tagstore.kernel.models.base import MAX_ID
from tagstore.kernel.models.user import User
from tagstore.kernel.repositories.project_repository import ProjectRepository
from tagstore.kernel.repositories.record_repository import RecordRepository


# Security scheme
security = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]

# Ids outside the INTEGER range are rejected before they reach the database
ProjectId = Annotated[int, Path(ge=1, le=MAX_ID, description="Project id")]
RecordId = Annotated[int, Path(ge=1, le=MAX_ID, description="Record id")]


def encode_bearer(token: SessionToken) -> str:
    """Bearer credential carrying a token: ``<user_id>.<issued_at>.<hash>``."""
    return f"{token.user_id}.{token.issued_at}.{token.hash}"


def decode_bearer(credential: str) -> SessionToken:
    """Parse a bearer credential; malformed parts come back as missing fields."""
    parts = credential.split(".")
    if len(parts) != 3:
        return SessionToken()
    user_id, issued_at, token_hash = parts
    return SessionToken(
        user_id=_bearer_int(user_id),
        issued_at=_bearer_int(issued_at),
        hash=token_hash or None,
    )


def _bearer_int(part: str) -> Optional[int]:
    # ASCII digits only: str.isdigit also accepts characters int() rejects
    if not (part.isascii() and part.isdigit()):
        return None
    value = int(part)
    return value if value <= MAX_ID else None


def get_locks(request: Request) -> KeyedLocks:
    return request.app.state.locks


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blobs


async def get_identity_service(
    db: DbSession,
    locks: Annotated[KeyedLocks, Depends(get_locks)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> IdentityService:
    return IdentityService(db, locks, tokens)


Identity = Annotated[IdentityService, Depends(get_identity_service)]


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    identity: Identity,
) -> User:
    """Resolve the bearer token to its user; raises Unauthorized otherwise."""
    token = decode_bearer(credentials.credentials) if credentials else None
    return await identity.check(token)


CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_project_repository(
    db: DbSession,
    locks: Annotated[KeyedLocks, Depends(get_locks)],
) -> ProjectRepository:
    return ProjectRepository(db, locks)


async def get_record_repository(
    db: DbSession,
    locks: Annotated[KeyedLocks, Depends(get_locks)],
    blobs: Annotated[BlobStore, Depends(get_blob_store)],
) -> RecordRepository:
    return RecordRepository(db, locks, blobs)


async def get_event_store(db: DbSession) -> EventStore:
    return EventStore(db)


Projects = Annotated[ProjectRepository, Depends(get_project_repository)]
Records = Annotated[RecordRepository, Depends(get_record_repository)]
Events = Annotated[EventStore, Depends(get_event_store)]
