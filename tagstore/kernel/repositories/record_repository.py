"""
Record repository: records of a project and their tag assignments.
"""

from typing import Callable, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tagstore.errors import BlobStoreError, InvalidArgument, NotFound
from tagstore.kernel.blobs.blob_store import BlobStore, ImagePayload, image_extension, image_file_name
from tagstore.kernel.identity.token import now_ms
from tagstore.kernel.locks import KeyedLocks, vocabulary_key
from tagstore.kernel.models.project import Project, RecordType
from tagstore.kernel.models.record import Record, RecordTag
from tagstore.kernel.repositories.project_repository import parse_record_type
from tagstore.logging_config import get_logger

logger = get_logger(__name__)

RecordInput = Union[str, ImagePayload]


class RecordRepository:
    """
    Owns records and, exclusively, their tag assignments.
    
    Image input is written to the blob store; the record keeps the returned
    reference. A new blob is always confirmed written before the record
    points at it, and the superseded blob is removed afterwards.
    """
    
    def __init__(
        self,
        session: AsyncSession,
        locks: KeyedLocks,
        blobs: BlobStore,
        clock: Callable[[], int] = now_ms,
    ):
        self.session = session
        self.locks = locks
        self.blobs = blobs
        self.clock = clock
    
    async def insert(self, project: Project, input: RecordInput) -> Record:
        """
        Add a record to a project.
        
        Image records are inserted first to obtain the id the blob name
        embeds, then pointed at the written blob.
        
        Raises:
            InvalidArgument: If input does not match the project's record type
            BlobStoreError: If the image could not be written
        """
        if parse_record_type(project.record_type) == RecordType.TEXT:
            if not isinstance(input, str):
                raise InvalidArgument("Text records take a string input")
            record = Record(project_id=project.id, input=input, tags={})
            self.session.add(record)
            await self.session.flush()
            return record
        
        payload = _image_payload(input)
        extension = image_extension(payload.content_type)
        
        record = Record(project_id=project.id, input=None, tags={})
        self.session.add(record)
        await self.session.flush()
        
        key = image_file_name(record.id, extension, self.clock())
        try:
            record.input = await self.blobs.put(key, payload.data)
        except BlobStoreError:
            await self.session.delete(record)
            await self.session.flush()
            raise
        
        await self.session.flush()
        return record
    
    async def get(self, record_id: int) -> Optional[Record]:
        """Get a record (with its tags) by id."""
        return await self.session.get(Record, record_id)
    
    async def require(self, record_id: int) -> Record:
        """
        Raises:
            NotFound: If there is no such record
        """
        record = await self.get(record_id)
        if record is None:
            raise NotFound(f"Record {record_id} does not exist")
        return record
    
    async def list_by_project(self, project_id: int) -> List[Record]:
        """Records of a project in insertion order."""
        query = select(Record).where(Record.project_id == project_id).order_by(Record.id)
        result = await self.session.execute(query)
        return list(result.scalars().all())
    
    async def update_input(
        self,
        record_id: int,
        input: RecordInput,
        record_type: Union[RecordType, str],
    ) -> Record:
        """
        Replace a record's input.
        
        For images the new blob is written first; if its reference differs
        from the old one the record is repointed and the old blob deleted.
        
        Raises:
            NotFound: If there is no such record
            InvalidArgument: If input does not match record_type
            BlobStoreError: If the new image could not be written
        """
        record = await self.require(record_id)
        
        if parse_record_type(record_type) == RecordType.TEXT:
            if not isinstance(input, str):
                raise InvalidArgument("Text records take a string input")
            record.input = input
            await self.session.flush()
            return record
        
        payload = _image_payload(input)
        key = image_file_name(record.id, image_extension(payload.content_type), self.clock())
        old_reference = record.input
        reference = await self.blobs.put(key, payload.data)
        
        if reference != old_reference:
            record.input = reference
            await self.session.flush()
            if old_reference:
                await self._discard_blob(old_reference, record.id)
        return record
    
    async def remove(self, record_id: int, record_type: Union[RecordType, str]) -> None:
        """
        Delete a record, and its blob for Image records. No-op if the record is missing.
        """
        record = await self.get(record_id)
        if record is None:
            return
        
        if parse_record_type(record_type) == RecordType.IMAGE and record.input:
            await self._discard_blob(record.input, record.id)
        
        await self.session.delete(record)
        await self.session.flush()
    
    async def set_tag(self, record_id: int, tag_name: str, tag_value: str) -> Record:
        """
        Assign ``tag_name=tag_value``, replacing any value already set for that name.
        
        Raises:
            NotFound: If there is no such record
        """
        project_id = await self._project_of(record_id)
        async with self.locks.hold(vocabulary_key(project_id)):
            record = await self._load(record_id)
            assigned = record.tags.get(tag_name)
            if assigned is not None:
                assigned.value = tag_value
            else:
                record.tags[tag_name] = RecordTag(name=tag_name, value=tag_value)
            await self.session.commit()
        return record
    
    async def remove_tag(self, record_id: int, tag_name: str) -> Record:
        """
        Drop the assignment for ``tag_name``; no-op if the record has none.
        
        Raises:
            NotFound: If there is no such record
        """
        project_id = await self._project_of(record_id)
        async with self.locks.hold(vocabulary_key(project_id)):
            record = await self._load(record_id)
            if record.tags.pop(tag_name, None) is not None:
                await self.session.commit()
        return record
    
    async def _project_of(self, record_id: int) -> int:
        query = select(Record.project_id).where(Record.id == record_id)
        project_id = (await self.session.execute(query)).scalar_one_or_none()
        if project_id is None:
            raise NotFound(f"Record {record_id} does not exist")
        return project_id
    
    async def _load(self, record_id: int) -> Record:
        """Re-read a record inside the vocabulary lock, discarding stale tags."""
        query = (
            select(Record)
            .where(Record.id == record_id)
            .execution_options(populate_existing=True)
        )
        record = (await self.session.execute(query)).scalar_one_or_none()
        if record is None:
            raise NotFound(f"Record {record_id} does not exist")
        return record
    
    async def _discard_blob(self, reference: str, record_id: int) -> None:
        """Best-effort blob removal; the record mutation has already happened."""
        try:
            await self.blobs.delete(reference)
        except BlobStoreError:
            logger.warning(
                "Could not delete blob",
                exc_info=True,
                extra={"blob": reference, "record_id": record_id},
            )


def _image_payload(input: RecordInput) -> ImagePayload:
    if not isinstance(input, ImagePayload):
        raise InvalidArgument("Image records take an image payload")
    return input
