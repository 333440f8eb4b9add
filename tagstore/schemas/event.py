"""
Event log schemas.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    
    id: int
    user_id: Optional[int]
    project_id: Optional[int]
    record_id: Optional[int]
    action: str
    info: Dict[str, Any]
    created_at: datetime
