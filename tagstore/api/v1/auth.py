"""
Authentication endpoints.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials

from tagstore.api.deps import Identity, decode_bearer, encode_bearer, security
from tagstore.kernel.identity.token import SessionToken
from tagstore.kernel.models.user import User
from tagstore.schemas.auth import Credentials, TokenResponse, UserResponse

router = APIRouter()


def _token_response(user: User, token: SessionToken) -> TokenResponse:
    return TokenResponse(
        token=token,
        bearer=encode_bearer(token),
        user=UserResponse.model_validate(user),
    )


@router.post("/signin", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def sign_in(data: Credentials, identity: Identity):
    """
    Register a new user.
    
    Returns the user's first session token.
    """
    user, token = await identity.sign_in(data.username, data.password)
    return _token_response(user, token)


@router.post("/login", response_model=TokenResponse)
async def log_in(data: Credentials, identity: Identity):
    """
    Authenticate and return a new session token.
    
    Any token issued earlier to the same user stops working.
    """
    user, token = await identity.log_in(data.username, data.password)
    return _token_response(user, token)


@router.post("/renew", response_model=TokenResponse)
async def renew(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    identity: Identity,
):
    """Exchange a valid token for a fresh one; the presented token is invalidated."""
    token = decode_bearer(credentials.credentials) if credentials else None
    user, fresh = await identity.renew(token)
    return _token_response(user, fresh)
