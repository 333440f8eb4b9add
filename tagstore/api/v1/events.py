"""
Event log queries.
"""

from typing import List, Optional

from fastapi import APIRouter, Query

from tagstore.api.deps import CurrentUser, Events
from tagstore.kernel.events.event_types import EventOrder
from tagstore.kernel.models.base import MAX_ID
from tagstore.schemas.event import EventResponse

router = APIRouter()


@router.get("", response_model=List[EventResponse])
async def list_events(
    user: CurrentUser,
    events: Events,
    user_id: Optional[int] = Query(None, ge=1, le=MAX_ID, description="Events by this user"),
    project_id: Optional[int] = Query(None, ge=1, le=MAX_ID, description="Events about this project"),
    record_id: Optional[int] = Query(None, ge=1, le=MAX_ID, description="Events about this record"),
    order: EventOrder = Query(EventOrder.DESCENDING, description="asc or desc"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
):
    """List events matching every given filter."""
    found = await events.query(
        order=order,
        user_id=user_id,
        project_id=project_id,
        record_id=record_id,
        limit=limit,
    )
    return [EventResponse.model_validate(e) for e in found]
