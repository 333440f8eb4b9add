"""
Record models: one input belonging to a project plus its tag assignments.
"""

from typing import Dict, Optional

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, attribute_keyed_dict, mapped_column, relationship

from tagstore.kernel.models.base import Base, CreatedAtMixin


class Record(Base, CreatedAtMixin):
    """
    A record of a project.

    ``input`` holds the text itself for Text projects and the blob store
    reference for Image projects. ``project_id`` carries no foreign key:
    deleting a project leaves its records in place.
    """
    
    __tablename__ = "records"
    
    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(
        nullable=False,
        index=True,
    )
    input: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    
    # One entry per tag name, kept in assignment order
    tags: Mapped[Dict[str, "RecordTag"]] = relationship(
        "RecordTag",
        collection_class=attribute_keyed_dict("name"),
        back_populates="record",
        cascade="all, delete-orphan",
        order_by="RecordTag.id",
        lazy="selectin",
    )

    # AUTOINCREMENT keeps ids of deleted records from being handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    def tag_pairs(self) -> list[dict]:
        return [{"name": t.name, "value": t.value} for t in self.tags.values()]

    def __repr__(self) -> str:
        return f"<Record {self.id} project={self.project_id}>"


class RecordTag(Base):
    """A ``name=value`` assignment on a record."""
    
    __tablename__ = "record_tags"
    
    id: Mapped[int] = mapped_column(primary_key=True)
    record_id: Mapped[int] = mapped_column(
        ForeignKey("records.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    value: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    
    record: Mapped["Record"] = relationship(
        "Record",
        back_populates="tags",
    )
    
    __table_args__ = (
        UniqueConstraint("record_id", "name", name="uq_record_tags_record_name"),
    )
