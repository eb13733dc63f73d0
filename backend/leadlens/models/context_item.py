"""
Context Item Model

One piece of grounding context attached to a project: free text, a scraped
web page, or an uploaded file. Content is immutable once stored.
"""
from datetime import datetime
from sqlalchemy import String, Text, DateTime, ForeignKey, JSON, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Any, Dict, Optional
import enum
import uuid

from ..database import Base


class ContentKind(str, enum.Enum):
    """Kind of context item."""
    TEXT = "text"
    IMAGE = "image"
    DOCUMENT = "document"
    URL = "url"


class ContextItem(Base):
    """
    A context record for a project.

    `content` holds the raw text, the stored file URL, or the source URL.
    `item_metadata` holds the kind-specific bag (scraped summary, filenames).
    """
    __tablename__ = "context_items"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    project_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    content_type: Mapped[ContentKind] = mapped_column(
        SQLEnum(ContentKind),
        nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # "metadata" is reserved on declarative classes
    item_metadata: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        "metadata",
        JSON,
        nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True
    )

    project: Mapped["Project"] = relationship(
        "Project",
        back_populates="context_items"
    )

    def __repr__(self) -> str:
        return f"<ContextItem(id={self.id}, type={self.content_type})>"
