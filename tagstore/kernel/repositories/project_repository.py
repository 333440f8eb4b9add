"""
Project repository: projects and their tag vocabulary.

Shrinking the vocabulary (removing a tag or one of its values) cascades
into every record of the project in the same transaction, under the
project's vocabulary lock.
"""

from typing import Any, Dict, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tagstore.errors import Conflict, InvalidArgument, NotFound
from tagstore.kernel.locks import KeyedLocks, commit_or_conflict, title_key, vocabulary_key
from tagstore.kernel.models.project import Project, ProjectTag, ProjectTagValue, RecordType
from tagstore.kernel.models.record import Record
from tagstore.logging_config import get_logger

logger = get_logger(__name__)


def parse_record_type(value: Union[RecordType, str]) -> RecordType:
    """
    Raises:
        InvalidArgument: If value is neither "Text" nor "Image"
    """
    try:
        return RecordType(value)
    except ValueError:
        raise InvalidArgument(f"Record type must be one of Text, Image (got '{value}')")


class ProjectRepository:
    """Owns projects and, exclusively, their tags."""
    
    def __init__(self, session: AsyncSession, locks: KeyedLocks):
        self.session = session
        self.locks = locks
    
    async def is_title_taken(self, title: str) -> bool:
        query = select(Project.id).where(Project.title == title)
        result = await self.session.execute(query)
        return result.first() is not None
    
    async def create(self, title: str, record_type: Union[RecordType, str]) -> Project:
        """
        Create a project with an empty vocabulary.
        
        Raises:
            InvalidArgument: If record_type is not Text or Image
            Conflict: If the title is already taken
        """
        record_type = parse_record_type(record_type)
        
        async with self.locks.hold(title_key(title)):
            if await self.is_title_taken(title):
                raise Conflict(f"Project title '{title}' is already taken")
            
            project = Project(title=title, record_type=record_type.value, tags={})
            self.session.add(project)
            await commit_or_conflict(self.session, f"Project title '{title}' is already taken")
        return project
    
    async def get(self, project_id: int) -> Optional[Project]:
        """Get a project (with its tags) by id."""
        return await self.session.get(Project, project_id)
    
    async def require(self, project_id: int) -> Project:
        """
        Raises:
            NotFound: If there is no such project
        """
        project = await self.get(project_id)
        if project is None:
            raise NotFound(f"Project {project_id} does not exist")
        return project
    
    async def list_projects(self) -> List[Project]:
        """All projects, oldest first."""
        result = await self.session.execute(select(Project).order_by(Project.id))
        return list(result.scalars().all())
    
    async def delete(self, project_id: int) -> None:
        """
        Delete a project and its vocabulary.
        
        Records of the project are left in place with their project_id.
        
        Raises:
            NotFound: If there is no such project
        """
        async with self.locks.hold(vocabulary_key(project_id)):
            project = await self._load(project_id)
            await self.session.delete(project)
            await self.session.commit()
        logger.info("Project deleted", extra={"project_id": project_id})
    
    async def add_tag(self, project_id: int, tag_name: str) -> Project:
        """Add a tag name to the vocabulary; no-op if it already exists."""
        async with self.locks.hold(vocabulary_key(project_id)):
            project = await self._load(project_id)
            if tag_name not in project.tags:
                project.tags[tag_name] = ProjectTag(name=tag_name, allowed=[])
                await commit_or_conflict(self.session, f"Tag '{tag_name}' already exists")
        return project
    
    async def remove_tag(self, project_id: int, tag_name: str) -> int:
        """
        Remove a tag from the vocabulary and from every record of the project.
        
        Returns:
            Number of records that lost the tag
        """
        async with self.locks.hold(vocabulary_key(project_id)):
            project = await self._load(project_id)
            project.tags.pop(tag_name, None)
            
            touched = 0
            for record in await self._records_of(project_id):
                if record.tags.pop(tag_name, None) is not None:
                    touched += 1
            
            await self.session.commit()
        
        logger.info(
            "Tag removed",
            extra={"project_id": project_id, "tag_name": tag_name, "records": touched},
        )
        return touched
    
    async def add_tag_value(self, project_id: int, tag_name: str, value: str) -> Project:
        """Allow a value for a tag; no-op if the tag is unknown or already allows it."""
        async with self.locks.hold(vocabulary_key(project_id)):
            project = await self._load(project_id)
            tag = project.tags.get(tag_name)
            if tag is not None and tag.find_value(value) is None:
                tag.allowed.append(ProjectTagValue(value=value))
                await commit_or_conflict(self.session, f"Value '{value}' already exists")
        return project
    
    async def remove_tag_value(self, project_id: int, tag_name: str, value: str) -> int:
        """
        Disallow a value and strip ``tag_name=value`` from every record of the project.
        
        Records holding another value for the same tag keep it.
        
        Returns:
            Number of records that lost the assignment
        """
        async with self.locks.hold(vocabulary_key(project_id)):
            project = await self._load(project_id)
            tag = project.tags.get(tag_name)
            if tag is not None:
                allowed = tag.find_value(value)
                if allowed is not None:
                    tag.allowed.remove(allowed)
            
            touched = 0
            for record in await self._records_of(project_id):
                assigned = record.tags.get(tag_name)
                if assigned is not None and assigned.value == value:
                    del record.tags[tag_name]
                    touched += 1
            
            await self.session.commit()
        
        logger.info(
            "Tag value removed",
            extra={
                "project_id": project_id,
                "tag_name": tag_name,
                "tag_value": value,
                "records": touched,
            },
        )
        return touched
    
    async def status(self, project_id: int) -> Dict[str, Any]:
        """
        Tagging progress of a project.
        
        Only names and values still in the vocabulary are counted.
        
        Returns:
            {"title", "records", "tagged_records",
             "tags": {name: {"count", "values": {value: count}}}}
        """
        project = await self.require(project_id)
        tags = {
            name: {"count": 0, "values": {value: 0 for value in tag.values}}
            for name, tag in project.tags.items()
        }
        
        records = await self._records_of(project_id, refresh=False)
        tagged = 0
        for record in records:
            if record.tags:
                tagged += 1
            for name, assigned in record.tags.items():
                summary = tags.get(name)
                if summary is None:
                    continue
                summary["count"] += 1
                if assigned.value in summary["values"]:
                    summary["values"][assigned.value] += 1
        
        return {
            "title": project.title,
            "records": len(records),
            "tagged_records": tagged,
            "tags": tags,
        }
    
    async def _load(self, project_id: int) -> Project:
        """Re-read a project inside a vocabulary lock, discarding stale state."""
        query = (
            select(Project)
            .where(Project.id == project_id)
            .execution_options(populate_existing=True)
        )
        project = (await self.session.execute(query)).scalar_one_or_none()
        if project is None:
            raise NotFound(f"Project {project_id} does not exist")
        return project
    
    async def _records_of(self, project_id: int, refresh: bool = True) -> List[Record]:
        query = select(Record).where(Record.project_id == project_id).order_by(Record.id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return list(result.scalars().all())
