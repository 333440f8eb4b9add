"""
Record endpoints: input and tag assignments of a single record.
"""

from fastapi import APIRouter

from tagstore.api.deps import CurrentUser, Events, Projects, RecordId, Records
from tagstore.kernel.events.event_types import EventAction
from tagstore.kernel.models.record import Record
from tagstore.kernel.repositories.project_repository import ProjectRepository
from tagstore.schemas.common import SuccessResponse
from tagstore.schemas.record import RecordInput, RecordResponse, RecordTagSet

router = APIRouter()


async def _record_type(projects: ProjectRepository, record: Record) -> str:
    """Record type of the record's project; NotFound for orphaned records."""
    project = await projects.require(record.project_id)
    return project.record_type


@router.get("/{record_id}", response_model=RecordResponse)
async def get_record(record_id: RecordId, user: CurrentUser, records: Records):
    """Get a record with its tags."""
    return RecordResponse.from_record(await records.require(record_id))


@router.put("/{record_id}", response_model=RecordResponse)
async def update_record(
    record_id: RecordId,
    data: RecordInput,
    user: CurrentUser,
    projects: Projects,
    records: Records,
    events: Events,
):
    """Replace a record's input."""
    record = await records.require(record_id)
    record_type = await _record_type(projects, record)
    record = await records.update_input(record_id, data.to_core(), record_type)
    
    await events.append(
        user_id=user.id,
        action=EventAction.RECORD_UPDATED,
        info={"project_id": record.project_id, "record_id": record_id},
    )
    return RecordResponse.from_record(record)


@router.delete("/{record_id}", response_model=SuccessResponse)
async def delete_record(
    record_id: RecordId,
    user: CurrentUser,
    projects: Projects,
    records: Records,
    events: Events,
):
    """Delete a record (and its image, for Image projects)."""
    record = await records.require(record_id)
    project_id = record.project_id
    await records.remove(record_id, await _record_type(projects, record))
    
    await events.append(
        user_id=user.id,
        action=EventAction.RECORD_DELETED,
        info={"project_id": project_id, "record_id": record_id},
    )
    return SuccessResponse(message="Record deleted")


@router.put("/{record_id}/tags/{tag_name}", response_model=RecordResponse)
async def set_tag(
    record_id: RecordId,
    tag_name: str,
    data: RecordTagSet,
    user: CurrentUser,
    records: Records,
    events: Events,
):
    """Assign a value for a tag name, replacing any previous value."""
    record = await records.set_tag(record_id, tag_name, data.value)
    
    await events.append(
        user_id=user.id,
        action=EventAction.RECORD_TAG_SET,
        info={
            "project_id": record.project_id,
            "record_id": record_id,
            "tag_name": tag_name,
            "tag_value": data.value,
        },
    )
    return RecordResponse.from_record(record)


@router.delete("/{record_id}/tags/{tag_name}", response_model=RecordResponse)
async def remove_tag(
    record_id: RecordId,
    tag_name: str,
    user: CurrentUser,
    records: Records,
    events: Events,
):
    """Drop the record's assignment for a tag name (no-op if absent)."""
    record = await records.remove_tag(record_id, tag_name)
    
    await events.append(
        user_id=user.id,
        action=EventAction.RECORD_TAG_REMOVED,
        info={"project_id": record.project_id, "record_id": record_id, "tag_name": tag_name},
    )
    return RecordResponse.from_record(record)
