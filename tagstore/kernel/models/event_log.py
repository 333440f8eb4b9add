"""
Immutable event log for the audit trail.

Rows are only ever inserted; nothing updates or deletes them.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, JSON, String, func
from sqlalchemy.orm import Mapped, mapped_column

from tagstore.kernel.models.base import Base


class EventLog(Base):
    """
    One user action against the store.

    ``project_id`` and ``record_id`` are copied out of ``info`` on insert so
    the log can be queried by them.
    """
    
    __tablename__ = "event_logs"
    
    id: Mapped[int] = mapped_column(primary_key=True)
    
    # Actor; None for unauthenticated actions
    user_id: Mapped[Optional[int]] = mapped_column(
        nullable=True,
        index=True,
    )
    project_id: Mapped[Optional[int]] = mapped_column(
        nullable=True,
        index=True,
    )
    record_id: Mapped[Optional[int]] = mapped_column(
        nullable=True,
        index=True,
    )
    action: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    info: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )
    
    # Assigned by the database, never by the caller
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    
    __table_args__ = (
        Index("ix_event_logs_user_time", "user_id", "created_at"),
        {"sqlite_autoincrement": True},
    )
    __mapper_args__ = {"eager_defaults": True}
    
    def __repr__(self) -> str:
        return f"<EventLog {self.id} {self.action}>"
