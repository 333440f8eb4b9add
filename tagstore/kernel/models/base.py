"""
Base model with common fields.
"""

from datetime import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Largest id an INTEGER primary key can hold
MAX_ID = 2**63 - 1


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""


class CreatedAtMixin:
    """Mixin for a database-assigned created_at timestamp."""
    
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    # Fetch server defaults at flush so async callers never lazy-load them
    __mapper_args__ = {"eager_defaults": True}
