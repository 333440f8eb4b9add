"""
Project models: a project and its tag vocabulary.
"""

from enum import Enum
from typing import Dict, List

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, attribute_keyed_dict, mapped_column, relationship

from tagstore.kernel.models.base import Base, CreatedAtMixin


class RecordType(str, Enum):
    """Kind of input every record of a project carries."""
    TEXT = "Text"
    IMAGE = "Image"


class Project(Base, CreatedAtMixin):
    """Container of records sharing one tag vocabulary."""
    
    __tablename__ = "projects"
    
    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(
        String(500),
        unique=True,
        index=True,
        nullable=False,
    )
    # A RecordType value: "Text" or "Image"
    record_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )
    
    # Keyed by tag name; ordered by creation
    tags: Mapped[Dict[str, "ProjectTag"]] = relationship(
        "ProjectTag",
        collection_class=attribute_keyed_dict("name"),
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectTag.id",
        lazy="selectin",
    )

    # Ids are never reused: orphaned records keep pointing at a deleted project
    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self) -> str:
        return f"<Project {self.title[:50]}>"


class ProjectTag(Base):
    """A tag name defined on a project."""
    
    __tablename__ = "project_tags"
    
    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    
    project: Mapped["Project"] = relationship(
        "Project",
        back_populates="tags",
    )
    allowed: Mapped[List["ProjectTagValue"]] = relationship(
        "ProjectTagValue",
        back_populates="tag",
        cascade="all, delete-orphan",
        order_by="ProjectTagValue.id",
        lazy="selectin",
    )
    
    __table_args__ = (
        UniqueConstraint("project_id", "name", name="uq_project_tags_project_name"),
    )

    @property
    def values(self) -> List[str]:
        """Permitted values, in the order they were added."""
        return [v.value for v in self.allowed]

    def find_value(self, value: str):
        for allowed in self.allowed:
            if allowed.value == value:
                return allowed
        return None

    def __repr__(self) -> str:
        return f"<ProjectTag {self.name} values={self.values}>"


class ProjectTagValue(Base):
    """One permitted value of a project tag."""
    
    __tablename__ = "project_tag_values"
    
    id: Mapped[int] = mapped_column(primary_key=True)
    tag_id: Mapped[int] = mapped_column(
        ForeignKey("project_tags.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    value: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    
    tag: Mapped["ProjectTag"] = relationship(
        "ProjectTag",
        back_populates="allowed",
    )
    
    __table_args__ = (
        UniqueConstraint("tag_id", "value", name="uq_project_tag_values_tag_value"),
    )
