"""
Pydantic schemas for API request/response validation.
"""

from tagstore.schemas.auth import Credentials, TokenResponse, UserResponse
from tagstore.schemas.project import (
    CascadeResponse,
    ProjectCreate,
    ProjectListItem,
    ProjectResponse,
    ProjectStatusResponse,
    TagCreate,
    TagValueCreate,
)
from tagstore.schemas.record import RecordInput, RecordResponse, RecordTagSet
from tagstore.schemas.event import EventResponse
from tagstore.schemas.common import ErrorResponse, HealthResponse, SuccessResponse

__all__ = [
    "Credentials",
    "TokenResponse",
    "UserResponse",
    "CascadeResponse",
    "ProjectCreate",
    "ProjectListItem",
    "ProjectResponse",
    "ProjectStatusResponse",
    "TagCreate",
    "TagValueCreate",
    "RecordInput",
    "RecordResponse",
    "RecordTagSet",
    "EventResponse",
    "ErrorResponse",
    "HealthResponse",
    "SuccessResponse",
]
