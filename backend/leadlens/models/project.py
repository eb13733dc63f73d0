"""
Project Model

A project is a single lead or campaign. All grounding context, conversations
and generated output hang off a project, and every row is owned by one user.
"""
from datetime import datetime
from sqlalchemy import String, Text, DateTime, Integer, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional, List
import enum
import uuid

from ..database import Base


class ProjectPriority(str, enum.Enum):
    """Priority of a project."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ProjectStatus(str, enum.Enum):
    """Lifecycle status of a project. Archiving moves it to COMPLETED."""
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"


class Project(Base):
    """
    A lead or campaign the user is working on.

    Deleting a project cascades to its context items and generated artifacts.
    Conversations reference the project by id only and survive deletion.
    """
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    lead_source: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    priority: Mapped[ProjectPriority] = mapped_column(
        SQLEnum(ProjectPriority),
        default=ProjectPriority.MEDIUM,
        nullable=False
    )
    status: Mapped[ProjectStatus] = mapped_column(
        SQLEnum(ProjectStatus),
        default=ProjectStatus.DRAFT,
        nullable=False,
        index=True
    )
    progress: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # AI-produced summary of the project and its context
    context_summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    # Relationships
    context_items: Mapped[List["ContextItem"]] = relationship(
        "ContextItem",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ContextItem.created_at"
    )
    artifacts: Mapped[List["GeneratedArtifact"]] = relationship(
        "GeneratedArtifact",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name={self.name})>"
