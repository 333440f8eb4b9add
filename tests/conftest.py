"""
Pytest fixtures for tagstore tests.

Every test gets its own SQLite database file under tmp_path.
"""

from typing import AsyncGenerator, Dict, List

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from tagstore.database import create_engine_for, create_session_maker, create_tables
from tagstore.errors import BlobStoreError
from tagstore.kernel.events.event_store import EventStore
from tagstore.kernel.identity.identity_service import IdentityService
from tagstore.kernel.identity.token import TokenService
from tagstore.kernel.identity.user_store import UserStore
from tagstore.kernel.locks import KeyedLocks
from tagstore.kernel.repositories.project_repository import ProjectRepository
from tagstore.kernel.repositories.record_repository import RecordRepository


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""
    
    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now
    
    def __call__(self) -> int:
        return self.now
    
    def advance(self, ms: int) -> None:
        self.now += ms


class RecordingBlobStore:
    """In-memory blob store that remembers every write and delete."""
    
    def __init__(self):
        self.blobs: Dict[str, bytes] = {}
        self.writes: List[str] = []
        self.deletes: List[str] = []
        self.fail_puts = False
        self.fail_deletes = False
    
    async def put(self, key: str, data: bytes) -> str:
        if self.fail_puts:
            raise BlobStoreError(f"Could not write blob '{key}'")
        self.blobs[key] = data
        self.writes.append(key)
        return key
    
    async def delete(self, reference: str) -> None:
        if self.fail_deletes:
            raise BlobStoreError(f"Could not delete blob '{reference}'")
        self.blobs.pop(reference, None)
        self.deletes.append(reference)


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Create a test database engine with all tables."""
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables(engine)
    
    yield engine
    
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    return create_session_maker(db_engine)


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def locks() -> KeyedLocks:
    return KeyedLocks()


@pytest.fixture
def blobs() -> RecordingBlobStore:
    return RecordingBlobStore()


@pytest.fixture
def tokens(clock: FakeClock) -> TokenService:
    return TokenService(clock=clock)


@pytest.fixture
def user_store(db_session, locks) -> UserStore:
    return UserStore(db_session, locks)


@pytest.fixture
def identity(db_session, locks, tokens) -> IdentityService:
    return IdentityService(db_session, locks, tokens)


@pytest.fixture
def projects(db_session, locks) -> ProjectRepository:
    return ProjectRepository(db_session, locks)


@pytest.fixture
def records(db_session, locks, blobs, clock) -> RecordRepository:
    return RecordRepository(db_session, locks, blobs, clock=clock)


@pytest.fixture
def event_store(db_session) -> EventStore:
    return EventStore(db_session)


@pytest_asyncio.fixture
async def text_project(projects: ProjectRepository):
    """A Text project with no tags."""
    return await projects.create("Pokemon", "Text")


@pytest_asyncio.fixture
async def image_project(projects: ProjectRepository):
    """An Image project with no tags."""
    return await projects.create("Sprites", "Image")
