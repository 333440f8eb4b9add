"""
Kernel layer

- Identity: users and rolling session tokens (one live token per user)
- Repositories: projects with their tag vocabulary, records with their tags
- Event log: append-only audit trail
- Blob store: bytes behind Image-type records

Invariants:
- Removing a tag or tag value from a project strips it from the
  project's records in the same transaction
- Tag vocabulary changes and record tag changes of one project are
  serialized through the project's vocabulary lock
- Event log rows are never updated or deleted
"""

from tagstore.kernel.models import (
    EventLog,
    Project,
    ProjectTag,
    ProjectTagValue,
    Record,
    RecordTag,
    RecordType,
    User,
)
from tagstore.kernel.locks import KeyedLocks

__all__ = [
    "User",
    "Project",
    "ProjectTag",
    "ProjectTagValue",
    "RecordType",
    "Record",
    "RecordTag",
    "EventLog",
    "KeyedLocks",
]
