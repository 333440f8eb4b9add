"""
User store: identity, credentials and the stored session token hash.
"""

import hmac
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tagstore.errors import Conflict, NotFound, WrongPassword
from tagstore.kernel.identity.token import SessionToken
from tagstore.kernel.locks import KeyedLocks, commit_or_conflict, user_key
from tagstore.kernel.models.user import User


class UserStore:
    """
    Persistence of users.
    
    Passwords are kept and compared as plaintext; login compares the
    submitted password against the stored one byte for byte.
    """
    
    def __init__(self, session: AsyncSession, locks: KeyedLocks):
        self.session = session
        self.locks = locks
    
    async def is_taken(self, username: str) -> bool:
        """Case-sensitive exact match on username."""
        query = select(User.id).where(User.username == username)
        result = await self.session.execute(query)
        return result.first() is not None
    
    async def register(self, username: str, password: str) -> User:
        """
        Create a user.
        
        The availability check and the insert run under a per-username lock
        and are committed before the lock is released.
        
        Raises:
            Conflict: If the username is already registered
        """
        async with self.locks.hold(user_key(username)):
            if await self.is_taken(username):
                raise Conflict(f"Username '{username}' is already registered")
            
            user = User(username=username, password=password)
            self.session.add(user)
            await commit_or_conflict(
                self.session, f"Username '{username}' is already registered"
            )
        return user
    
    async def authenticate(self, username: str, password: str) -> User:
        """
        Check credentials.
        
        Raises:
            NotFound: If the username is not registered
            WrongPassword: If the password does not match
        """
        user = await self.get_by_username(username)
        if user is None:
            raise NotFound(f"Username '{username}' is not registered")
        
        if not hmac.compare_digest(user.password.encode("utf-8"), password.encode("utf-8")):
            raise WrongPassword("Password is wrong")
        
        return user
    
    async def set_token(self, user_id: int, token: SessionToken) -> None:
        """
        Overwrite the stored token; earlier tokens stop validating.
        
        Raises:
            NotFound: If there is no such user
        """
        user = await self.get(user_id)
        if user is None:
            raise NotFound(f"User {user_id} does not exist")
        user.token_hash = token.hash
        user.token_issued_at = token.issued_at
        await self.session.flush()
    
    async def get_token_hash(self, user_id: int) -> Optional[str]:
        """Read the stored hash straight from the database (never cached)."""
        query = select(User.token_hash).where(User.id == user_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()
    
    async def get(self, user_id: int) -> Optional[User]:
        """Get a user by id."""
        return await self.session.get(User, user_id)
    
    async def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by username."""
        query = select(User).where(User.username == username)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()
    
    async def list_users(self) -> List[User]:
        """All users, oldest first."""
        result = await self.session.execute(select(User).order_by(User.id))
        return list(result.scalars().all())
