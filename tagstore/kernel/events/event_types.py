"""
Action names written to the event log.

The log accepts any action string; these are the ones the service emits.
"""

from enum import Enum


class EventAction(str, Enum):
    """Actions recorded by the service."""
    
    # User events
    USER_SIGNED_IN = "user.signed_in"
    USER_LOGGED_IN = "user.logged_in"
    USER_TOKEN_RENEWED = "user.token_renewed"
    
    # Project events
    PROJECT_CREATED = "project.created"
    PROJECT_DELETED = "project.deleted"
    PROJECT_TAG_ADDED = "project.tag_added"
    PROJECT_TAG_REMOVED = "project.tag_removed"
    PROJECT_TAG_VALUE_ADDED = "project.tag_value_added"
    PROJECT_TAG_VALUE_REMOVED = "project.tag_value_removed"
    
    # Record events
    RECORD_CREATED = "record.created"
    RECORD_UPDATED = "record.updated"
    RECORD_DELETED = "record.deleted"
    RECORD_TAG_SET = "record.tag_set"
    RECORD_TAG_REMOVED = "record.tag_removed"


class EventOrder(str, Enum):
    """Listing order for event queries; callers always choose one."""
    ASCENDING = "asc"
    DESCENDING = "desc"
