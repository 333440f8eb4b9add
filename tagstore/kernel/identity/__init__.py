"""
Identity Core - users and session tokens.
"""

from tagstore.kernel.identity.token import (
    SessionToken,
    TokenService,
    TOKEN_MAX_AGE_MS,
    compute_token_hash,
    now_ms,
)
from tagstore.kernel.identity.user_store import UserStore
from tagstore.kernel.identity.identity_service import IdentityService

__all__ = [
    "SessionToken",
    "TokenService",
    "TOKEN_MAX_AGE_MS",
    "compute_token_hash",
    "now_ms",
    "UserStore",
    "IdentityService",
]
