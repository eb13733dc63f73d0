"""
Context Schemas

Pydantic models for project context items and the grounding preview.
"""
from datetime import datetime
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, model_validator

from ..models import ContentKind


class ContextItemCreate(BaseModel):
    """
    Request to attach a context item to a project.

    For text items `content` is the text itself; for url items it is the
    source URL; for files it is the stored file URL.
    """
    content_type: ContentKind
    content: str = Field(..., min_length=1)
    metadata: Optional[Dict[str, Any]] = None

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def content_not_blank(self):
        if not self.content.strip():
            raise ValueError("content must not be blank")
        return self

    @model_validator(mode="after")
    def scraped_metadata_shape(self):
        """Reject url metadata whose scraped fields cannot be rendered."""
        if self.content_type != ContentKind.URL or not self.metadata:
            return self
        scraped = self.metadata.get("scraped_data")
        if scraped is not None and not isinstance(scraped, dict):
            raise ValueError("metadata.scraped_data must be an object")
        for source, key in ((scraped or {}, "keyPoints"), (self.metadata, "key_points")):
            points = source.get(key)
            if points is not None and not isinstance(points, (list, str)):
                raise ValueError(f"{key} must be a list of strings")
        return self


class ContextItemResponse(BaseModel):
    """Context item returned from API."""
    id: str
    project_id: str
    content_type: ContentKind
    content: str
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="item_metadata")
    created_at: datetime

    model_config = {"from_attributes": True}


class ContextItemListResponse(BaseModel):
    items: List[ContextItemResponse]
    total: int


class GroundingPreviewResponse(BaseModel):
    """The grounding document exactly as generation would see it."""
    project_id: str
    text: str
    item_count: int
    available: bool
    warning: Optional[str] = None
