"""
Event Store service for the append-only audit log.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tagstore.errors import InvalidArgument
from tagstore.kernel.events.event_types import EventAction, EventOrder
from tagstore.kernel.models.base import MAX_ID
from tagstore.kernel.models.event_log import EventLog


class EventStore:
    """
    Service for the immutable event log.
    
    Usage:
        event_store = EventStore(session)
        await event_store.append(
            user_id=user.id,
            action=EventAction.RECORD_TAG_SET,
            info={"project_id": project.id, "record_id": record.id,
                  "tag_name": "Type", "tag_value": "Water"},
        )
    """
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def append(
        self,
        user_id: Optional[int],
        action: Union[EventAction, str],
        info: Dict[str, Any],
    ) -> EventLog:
        """
        Append an event.
        
        ``project_id`` and ``record_id`` found in ``info`` are indexed so
        the event shows up in per-project and per-record queries. The
        timestamp is assigned by the database.
        
        Raises:
            InvalidArgument: If info is not a mapping
        """
        if not isinstance(info, dict):
            raise InvalidArgument("Event info must be structured data")
        
        info = self._serialize_info(info)
        event = EventLog(
            user_id=user_id,
            project_id=_as_id(info.get("project_id")),
            record_id=_as_id(info.get("record_id")),
            action=action.value if isinstance(action, Enum) else action,
            info=info,
        )
        
        self.session.add(event)
        await self.session.flush()
        return event
    
    async def query(
        self,
        *,
        order: EventOrder,
        user_id: Optional[int] = None,
        project_id: Optional[int] = None,
        record_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[EventLog]:
        """
        Events matching every given filter, in insertion order.
        
        Args:
            order: ASCENDING (oldest first) or DESCENDING (newest first)
            user_id: Only events by this user
            project_id: Only events about this project
            record_id: Only events about this record
            limit: Maximum number of events
        """
        query = select(EventLog)
        if user_id is not None:
            query = query.where(EventLog.user_id == user_id)
        if project_id is not None:
            query = query.where(EventLog.project_id == project_id)
        if record_id is not None:
            query = query.where(EventLog.record_id == record_id)
        
        if order == EventOrder.DESCENDING:
            query = query.order_by(EventLog.id.desc())
        else:
            query = query.order_by(EventLog.id)
        if limit:
            query = query.limit(limit)
        
        result = await self.session.execute(query)
        return list(result.scalars().all())
    
    async def all(self, order: EventOrder) -> List[EventLog]:
        """Every event in the log."""
        return await self.query(order=order)
    
    def _serialize_info(self, info: Dict[str, Any]) -> Dict[str, Any]:
        """Convert info values to JSON-serializable types."""
        result = {}
        for key, value in info.items():
            if isinstance(value, Enum):
                result[key] = value.value
            elif isinstance(value, datetime):
                result[key] = value.isoformat()
            elif isinstance(value, dict):
                result[key] = self._serialize_info(value)
            elif isinstance(value, (list, tuple, set)):
                result[key] = [
                    self._serialize_info(v) if isinstance(v, dict) else v
                    for v in value
                ]
            else:
                result[key] = value
        return result


def _as_id(value: Any) -> Optional[int]:
    """An id-like info value as an int, or None if it cannot be stored as one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str) and value.isascii() and value.isdigit():
        value = int(value)
    if isinstance(value, int) and -MAX_ID <= value <= MAX_ID:
        return value
    return None
