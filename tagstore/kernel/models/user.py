"""
User model for identity management.
"""

from typing import Optional

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from tagstore.kernel.models.base import Base, CreatedAtMixin


class User(Base, CreatedAtMixin):
    """
    User account.

    The password is stored as submitted; login compares it verbatim.
    Only one session token hash is kept per user, so issuing a token
    supersedes every token issued before it.
    """
    
    __tablename__ = "users"
    
    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    token_hash: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
    )
    # Epoch milliseconds of the live token
    token_issued_at: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        nullable=True,
    )
    
    __table_args__ = {"sqlite_autoincrement": True}
    
    def __repr__(self) -> str:
        return f"<User {self.username}>"
