"""
Append-only event log.
"""

from tagstore.kernel.events.event_store import EventStore
from tagstore.kernel.events.event_types import EventAction, EventOrder

__all__ = [
    "EventStore",
    "EventAction",
    "EventOrder",
]
