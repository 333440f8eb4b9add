"""
User listing.
"""

from typing import List

from fastapi import APIRouter

from tagstore.api.deps import CurrentUser, Identity
from tagstore.schemas.auth import UserResponse

router = APIRouter()


@router.get("", response_model=List[UserResponse])
async def list_users(user: CurrentUser, identity: Identity):
    """List registered users, oldest first."""
    users = await identity.users.list_users()
    return [UserResponse.model_validate(u) for u in users]
