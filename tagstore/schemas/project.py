"""
Project schemas.
"""

from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, Field

from tagstore.kernel.models.project import Project, RecordType


class ProjectCreate(BaseModel):
    """Project creation request."""
    
    title: str = Field(..., min_length=1, max_length=500)
    record_type: str  # "Text" or "Image", checked by the repository


class TagCreate(BaseModel):
    """Tag name to add to a project's vocabulary."""
    
    name: str = Field(..., min_length=1, max_length=255)


class TagValueCreate(BaseModel):
    """Value to allow for a project tag."""
    
    value: str = Field(..., min_length=1, max_length=255)


class TagResponse(BaseModel):
    name: str
    values: List[str]


class ProjectResponse(BaseModel):
    """Project with its full tag vocabulary."""
    
    id: int
    title: str
    record_type: RecordType
    tags: List[TagResponse]
    created_at: datetime
    
    @classmethod
    def from_project(cls, project: Project) -> "ProjectResponse":
        return cls(
            id=project.id,
            title=project.title,
            record_type=project.record_type,
            tags=[TagResponse(name=t.name, values=t.values) for t in project.tags.values()],
            created_at=project.created_at,
        )


class ProjectListItem(BaseModel):
    id: int
    title: str


class TagStatus(BaseModel):
    count: int
    values: Dict[str, int]


class ProjectStatusResponse(BaseModel):
    """Tagging progress of a project."""
    
    title: str
    records: int
    tagged_records: int
    tags: Dict[str, TagStatus]


class CascadeResponse(BaseModel):
    """Result of a vocabulary removal."""
    
    project: ProjectResponse
    records_updated: int
