"""
Kernel Data Models

SQLAlchemy models for users, projects with their tag vocabulary,
records with their tag assignments, and the event log.
"""

from tagstore.kernel.models.base import MAX_ID, Base, CreatedAtMixin
from tagstore.kernel.models.user import User
from tagstore.kernel.models.project import Project, ProjectTag, ProjectTagValue, RecordType
from tagstore.kernel.models.record import Record, RecordTag
from tagstore.kernel.models.event_log import EventLog

__all__ = [
    "MAX_ID",
    "Base",
    "CreatedAtMixin",
    "User",
    "Project",
    "ProjectTag",
    "ProjectTagValue",
    "RecordType",
    "Record",
    "RecordTag",
    "EventLog",
]
