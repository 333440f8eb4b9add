"""
Record schemas.
"""

import base64
import binascii
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from tagstore.errors import InvalidArgument
from tagstore.kernel.blobs.blob_store import ImagePayload
from tagstore.kernel.models.record import Record


class RecordInput(BaseModel):
    """
    Record input: ``input`` for Text projects, or a base64 image with its
    content type for Image projects.
    """
    
    input: Optional[str] = None
    content_base64: Optional[str] = None
    content_type: Optional[str] = None
    
    @model_validator(mode="after")
    def exactly_one_kind(self) -> "RecordInput":
        has_text = self.input is not None
        has_image = self.content_base64 is not None
        if has_text == has_image:
            raise ValueError("Provide either input or content_base64")
        if has_image and not self.content_type:
            raise ValueError("content_type is required with content_base64")
        return self
    
    def to_core(self):
        """Text as str, image as ImagePayload."""
        if self.input is not None:
            return self.input
        try:
            data = base64.b64decode(self.content_base64, validate=True)
        except (binascii.Error, ValueError):
            raise InvalidArgument("content_base64 is not valid base64")
        return ImagePayload(data=data, content_type=self.content_type)


class TagAssignment(BaseModel):
    name: str
    value: str


class RecordTagSet(BaseModel):
    """Value to assign for a tag name."""
    
    value: str = Field(..., min_length=1, max_length=255)


class RecordResponse(BaseModel):
    id: int
    project_id: int
    input: Optional[str]
    tags: List[TagAssignment]
    created_at: datetime
    
    @classmethod
    def from_record(cls, record: Record) -> "RecordResponse":
        return cls(
            id=record.id,
            project_id=record.project_id,
            input=record.input,
            tags=[TagAssignment(**pair) for pair in record.tag_pairs()],
            created_at=record.created_at,
        )
