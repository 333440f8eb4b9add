"""
Rolling session tokens.

A token is ``(user_id, issued_at, hash)`` with
``hash = sha256(user_id ++ secret ++ issued_at)``. Only the latest hash is
stored per user, so at most one token per user is live: issuing a new
one (login or renewal) invalidates every earlier token, and when two
renewals race the last writer wins.
"""

import hashlib
import hmac
import time
from typing import Awaitable, Callable, Optional

from pydantic import BaseModel

from tagstore.logging_config import get_logger

logger = get_logger(__name__)

# Fixed policy, not configurable
TOKEN_MAX_AGE_MS = 24 * 3600 * 1000

TokenHashLookup = Callable[[int], Awaitable[Optional[str]]]


class SessionToken(BaseModel):
    """Session token as handed to and received from the transport."""
    
    user_id: Optional[int] = None
    issued_at: Optional[int] = None  # epoch milliseconds
    hash: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return (
            self.user_id is not None
            and self.issued_at is not None
            and bool(self.hash)
        )


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def compute_token_hash(user_id: int, secret: str, issued_at: int) -> str:
    """SHA-256 hex digest of ``user_id ++ secret ++ issued_at``."""
    material = f"{user_id}{secret}{issued_at}".encode("utf-8")
    return hashlib.sha256(material).hexdigest()


class TokenService:
    """
    Token generation, validation and renewal.
    
    The service holds no token state; stored hashes are read through the
    ``lookup`` callable on every validation.
    """
    
    def __init__(
        self,
        clock: Callable[[], int] = now_ms,
        max_age_ms: int = TOKEN_MAX_AGE_MS,
    ):
        self.clock = clock
        self.max_age_ms = max_age_ms
        self._last_issued_at = 0
    
    def generate(self, user_id: int, secret: str) -> SessionToken:
        """
        Issue a fresh token for ``user_id``.
        
        ``issued_at`` strictly increases across calls on one service, so two
        tokens for the same credentials never share a hash.
        """
        issued_at = max(self.clock(), self._last_issued_at + 1)
        self._last_issued_at = issued_at
        return SessionToken(
            user_id=user_id,
            issued_at=issued_at,
            hash=compute_token_hash(user_id, secret, issued_at),
        )
    
    async def validate(self, token: Optional[SessionToken], lookup: TokenHashLookup) -> bool:
        """
        Check a token against the stored hash. Fails closed.
        
        Args:
            token: Token received from the transport
            lookup: Async callable returning the stored hash for a user id
            
        Returns:
            True only if the token is complete, younger than the max age and
            matches the hash currently stored for its user
        """
        if token is None or not token.is_complete:
            logger.debug("Token rejected: incomplete")
            return False
        
        if self.clock() - token.issued_at > self.max_age_ms:
            logger.info("Token rejected: expired", extra={"user_id": token.user_id})
            return False
        
        stored = await lookup(token.user_id)
        if stored is None or not hmac.compare_digest(stored, token.hash):
            logger.info("Token rejected: hash mismatch", extra={"user_id": token.user_id})
            return False
        
        return True
    
    def renew(self, token: SessionToken, secret: str) -> SessionToken:
        """
        Issue a replacement for an already validated token.
        
        The caller must persist the new hash; doing so invalidates ``token``.
        """
        return self.generate(token.user_id, secret)
