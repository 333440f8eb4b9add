"""
Project endpoints: projects, their tag vocabulary and their records.
"""

from typing import List

from fastapi import APIRouter, status

from tagstore.api.deps import CurrentUser, Events, ProjectId, Projects, Records
from tagstore.kernel.events.event_types import EventAction
from tagstore.schemas.common import SuccessResponse
from tagstore.schemas.project import (
    CascadeResponse,
    ProjectCreate,
    ProjectListItem,
    ProjectResponse,
    ProjectStatusResponse,
    TagCreate,
    TagValueCreate,
)
from tagstore.schemas.record import RecordInput, RecordResponse

router = APIRouter()


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    data: ProjectCreate,
    user: CurrentUser,
    projects: Projects,
    events: Events,
):
    """Create a project with an empty tag vocabulary."""
    project = await projects.create(data.title, data.record_type)
    
    await events.append(
        user_id=user.id,
        action=EventAction.PROJECT_CREATED,
        info={
            "project_id": project.id,
            "title": project.title,
            "record_type": project.record_type,
        },
    )
    return ProjectResponse.from_project(project)


@router.get("", response_model=List[ProjectListItem])
async def list_projects(user: CurrentUser, projects: Projects):
    """List projects, oldest first."""
    return [ProjectListItem(id=p.id, title=p.title) for p in await projects.list_projects()]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: ProjectId, user: CurrentUser, projects: Projects):
    """Get a project with its tag vocabulary."""
    return ProjectResponse.from_project(await projects.require(project_id))


@router.delete("/{project_id}", response_model=SuccessResponse)
async def delete_project(
    project_id: ProjectId,
    user: CurrentUser,
    projects: Projects,
    events: Events,
):
    """
    Delete a project.
    
    Its records are not deleted and keep pointing at the removed project.
    """
    project = await projects.require(project_id)
    title = project.title
    await projects.delete(project_id)
    
    await events.append(
        user_id=user.id,
        action=EventAction.PROJECT_DELETED,
        info={"project_id": project_id, "title": title},
    )
    return SuccessResponse(message="Project deleted")


@router.get("/{project_id}/status", response_model=ProjectStatusResponse)
async def project_status(project_id: ProjectId, user: CurrentUser, projects: Projects):
    """Record counts per tag and per tag value."""
    return ProjectStatusResponse(**await projects.status(project_id))


@router.post("/{project_id}/tags", response_model=ProjectResponse)
async def add_tag(
    project_id: ProjectId,
    data: TagCreate,
    user: CurrentUser,
    projects: Projects,
    events: Events,
):
    """Add a tag name to the vocabulary (no-op if present)."""
    project = await projects.add_tag(project_id, data.name)
    
    await events.append(
        user_id=user.id,
        action=EventAction.PROJECT_TAG_ADDED,
        info={"project_id": project_id, "tag_name": data.name},
    )
    return ProjectResponse.from_project(project)


@router.delete("/{project_id}/tags/{tag_name}", response_model=CascadeResponse)
async def remove_tag(
    project_id: ProjectId,
    tag_name: str,
    user: CurrentUser,
    projects: Projects,
    events: Events,
):
    """Remove a tag from the vocabulary and from every record of the project."""
    touched = await projects.remove_tag(project_id, tag_name)
    
    await events.append(
        user_id=user.id,
        action=EventAction.PROJECT_TAG_REMOVED,
        info={"project_id": project_id, "tag_name": tag_name, "records_updated": touched},
    )
    project = await projects.require(project_id)
    return CascadeResponse(project=ProjectResponse.from_project(project), records_updated=touched)


@router.post("/{project_id}/tags/{tag_name}/values", response_model=ProjectResponse)
async def add_tag_value(
    project_id: ProjectId,
    tag_name: str,
    data: TagValueCreate,
    user: CurrentUser,
    projects: Projects,
    events: Events,
):
    """Allow a value for a tag (no-op if the tag is unknown or the value present)."""
    project = await projects.add_tag_value(project_id, tag_name, data.value)
    
    await events.append(
        user_id=user.id,
        action=EventAction.PROJECT_TAG_VALUE_ADDED,
        info={"project_id": project_id, "tag_name": tag_name, "tag_value": data.value},
    )
    return ProjectResponse.from_project(project)


@router.delete("/{project_id}/tags/{tag_name}/values/{value}", response_model=CascadeResponse)
async def remove_tag_value(
    project_id: ProjectId,
    tag_name: str,
    value: str,
    user: CurrentUser,
    projects: Projects,
    events: Events,
):
    """Disallow a value and strip it from every record of the project."""
    touched = await projects.remove_tag_value(project_id, tag_name, value)
    
    await events.append(
        user_id=user.id,
        action=EventAction.PROJECT_TAG_VALUE_REMOVED,
        info={
            "project_id": project_id,
            "tag_name": tag_name,
            "tag_value": value,
            "records_updated": touched,
        },
    )
    project = await projects.require(project_id)
    return CascadeResponse(project=ProjectResponse.from_project(project), records_updated=touched)


@router.get("/{project_id}/records", response_model=List[RecordResponse])
async def list_records(
    project_id: ProjectId,
    user: CurrentUser,
    projects: Projects,
    records: Records,
):
    """Records of a project in insertion order."""
    await projects.require(project_id)
    return [RecordResponse.from_record(r) for r in await records.list_by_project(project_id)]


@router.post(
    "/{project_id}/records",
    response_model=RecordResponse,
    status_code=status.HTTP_201_CREATED,
)
async def insert_record(
    project_id: ProjectId,
    data: RecordInput,
    user: CurrentUser,
    projects: Projects,
    records: Records,
    events: Events,
):
    """Add a record; Image projects take base64 content."""
    project = await projects.require(project_id)
    record = await records.insert(project, data.to_core())
    
    await events.append(
        user_id=user.id,
        action=EventAction.RECORD_CREATED,
        info={"project_id": project_id, "record_id": record.id},
    )
    return RecordResponse.from_record(record)
