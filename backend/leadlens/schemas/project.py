"""
Project Schemas

Pydantic models for project API requests and responses.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from ..models import ProjectPriority, ProjectStatus


class ProjectCreate(BaseModel):
    """Request to create a new project."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    lead_source: Optional[str] = Field(None, max_length=255)
    priority: ProjectPriority = ProjectPriority.MEDIUM
    status: ProjectStatus = ProjectStatus.DRAFT
    progress: int = Field(0, ge=0, le=100)

    model_config = {"extra": "forbid"}


class ProjectUpdate(BaseModel):
    """Request to update a project."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    lead_source: Optional[str] = Field(None, max_length=255)
    priority: Optional[ProjectPriority] = None
    status: Optional[ProjectStatus] = None
    progress: Optional[int] = Field(None, ge=0, le=100)

    model_config = {"extra": "forbid"}


class ProjectResponse(BaseModel):
    """Project data returned from API."""
    id: str
    name: str
    description: Optional[str] = None
    lead_source: Optional[str] = None
    priority: ProjectPriority
    status: ProjectStatus
    progress: int
    context_summary: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    # Stats
    context_item_count: int = 0

    model_config = {"from_attributes": True}


class ProjectListResponse(BaseModel):
    """List of projects."""
    projects: List[ProjectResponse]
    total: int


class ProjectSummaryResponse(BaseModel):
    """Stored AI summary of a project."""
    project_id: str
    context_summary: str


class ArtifactResponse(BaseModel):
    """A persisted tool output."""
    id: str
    project_id: str
    tool_kind: str
    content: str
    metadata: Optional[dict] = Field(None, validation_alias="artifact_metadata")
    created_at: datetime

    model_config = {"from_attributes": True}


class ArtifactListResponse(BaseModel):
    artifacts: List[ArtifactResponse]
    total: int
