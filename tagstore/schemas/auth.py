"""
Authentication schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from tagstore.kernel.identity.token import SessionToken


class Credentials(BaseModel):
    """Sign-in and login request."""
    
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=255)


class UserResponse(BaseModel):
    """Public user fields; never the password or token hash."""
    
    model_config = ConfigDict(from_attributes=True)
    
    id: int
    username: str
    created_at: datetime


class TokenResponse(BaseModel):
    """Issued session token plus the bearer string that carries it."""
    
    token: SessionToken
    bearer: str
    user: UserResponse
