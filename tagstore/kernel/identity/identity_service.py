"""
Identity service: sign-in, login, token checks and renewal.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tagstore.errors import Unauthorized
from tagstore.kernel.events.event_store import EventStore
from tagstore.kernel.events.event_types import EventAction
from tagstore.kernel.identity.token import SessionToken, TokenService
from tagstore.kernel.identity.user_store import UserStore
from tagstore.kernel.locks import KeyedLocks
from tagstore.kernel.models.user import User
from tagstore.logging_config import get_logger

logger = get_logger(__name__)


class IdentityService:
    """
    Ties the user store to the token service.
    
    Every successful sign-in, login or renewal stores a new token hash,
    which supersedes the user's previous token.
    """
    
    def __init__(self, session: AsyncSession, locks: KeyedLocks, tokens: TokenService):
        self.session = session
        self.users = UserStore(session, locks)
        self.tokens = tokens
        self.event_store = EventStore(session)
    
    async def sign_in(self, username: str, password: str) -> tuple[User, SessionToken]:
        """
        Register a new user and issue their first token.
        
        Raises:
            Conflict: If the username is already registered
        """
        user = await self.users.register(username, password)
        token = await self._issue(user)
        
        await self.event_store.append(
            user_id=user.id,
            action=EventAction.USER_SIGNED_IN,
            info={"username": user.username},
        )
        logger.info("User signed in", extra={"user_id": user.id})
        return user, token
    
    async def log_in(self, username: str, password: str) -> tuple[User, SessionToken]:
        """
        Check credentials and issue a new token.
        
        Raises:
            NotFound: If the username is not registered
            WrongPassword: If the password does not match
        """
        user = await self.users.authenticate(username, password)
        token = await self._issue(user)
        
        await self.event_store.append(
            user_id=user.id,
            action=EventAction.USER_LOGGED_IN,
            info={"username": user.username},
        )
        return user, token
    
    async def check(self, token: Optional[SessionToken]) -> User:
        """
        Resolve a token to its user.
        
        Raises:
            Unauthorized: If the token is missing, expired or superseded
        """
        if not await self.tokens.validate(token, self.users.get_token_hash):
            raise Unauthorized("Token is not valid")
        
        user = await self.users.get(token.user_id)
        if user is None:
            raise Unauthorized("Token is not valid")
        return user
    
    async def renew(self, token: Optional[SessionToken]) -> tuple[User, SessionToken]:
        """
        Replace a valid token with a fresh one; ``token`` stops validating.
        
        Raises:
            Unauthorized: If ``token`` does not validate
        """
        user = await self.check(token)
        fresh = self.tokens.renew(token, user.password)
        await self.users.set_token(user.id, fresh)
        
        await self.event_store.append(
            user_id=user.id,
            action=EventAction.USER_TOKEN_RENEWED,
            info={},
        )
        return user, fresh
    
    async def _issue(self, user: User) -> SessionToken:
        token = self.tokens.generate(user.id, user.password)
        await self.users.set_token(user.id, token)
        return token
