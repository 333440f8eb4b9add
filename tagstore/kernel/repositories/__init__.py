"""
Repositories for projects and records.
"""

from tagstore.kernel.repositories.project_repository import ProjectRepository, parse_record_type
from tagstore.kernel.repositories.record_repository import RecordRepository

__all__ = [
    "ProjectRepository",
    "RecordRepository",
    "parse_record_type",
]
