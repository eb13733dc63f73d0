"""
Projects API

Endpoints for project management, the AI summary and stored artifacts.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..generation import GenerationClient
from ..models import Project, ProjectStatus, ContextItem, GeneratedArtifact
from ..schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectListResponse,
    ProjectSummaryResponse,
    ArtifactResponse,
    ArtifactListResponse,
)
from ..services.records import get_project as fetch_project
from ..services.summary import generate_project_summary
from .deps import DOMAIN_ERRORS, get_current_user_id, get_generator, to_http_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


def _project_to_response(project: Project, item_count: int = 0) -> ProjectResponse:
    """Convert Project model to response schema."""
    return ProjectResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        lead_source=project.lead_source,
        priority=project.priority,
        status=project.status,
        progress=project.progress,
        context_summary=project.context_summary,
        created_at=project.created_at,
        updated_at=project.updated_at,
        context_item_count=item_count,
    )


async def _item_count(db: AsyncSession, project_id: str) -> int:
    stmt = select(func.count()).where(ContextItem.project_id == project_id)
    result = await db.execute(stmt)
    return result.scalar() or 0


async def _require_project(db: AsyncSession, user_id: str, project_id: str) -> Project:
    project = await fetch_project(db, user_id, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post("", response_model=ProjectResponse)
async def create_project(
    data: ProjectCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Create a new project."""
    if not data.name.strip():
        raise HTTPException(status_code=400, detail="Project name is required")

    project = Project(user_id=user_id, **data.model_dump())
    project.name = data.name.strip()
    db.add(project)
    await db.commit()
    await db.refresh(project)

    logger.info(f"Created project {project.id} for user {user_id}")
    return _project_to_response(project)


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    status: Optional[ProjectStatus] = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's projects, most recently updated first."""
    stmt = select(Project).where(Project.user_id == user_id)
    if status is not None:
        stmt = stmt.where(Project.status == status)
    result = await db.execute(stmt.order_by(Project.updated_at.desc()))
    projects = result.scalars().all()

    responses = [
        _project_to_response(project, await _item_count(db, project.id))
        for project in projects
    ]
    return ProjectListResponse(projects=responses, total=len(responses))


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get a project by ID."""
    project = await _require_project(db, user_id, project_id)
    return _project_to_response(project, await _item_count(db, project_id))


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Update a project."""
    project = await _require_project(db, user_id, project_id)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field in ("name", "priority", "status", "progress"):
            continue
        setattr(project, field, value)

    await db.commit()
    await db.refresh(project)
    return _project_to_response(project, await _item_count(db, project_id))


@router.post("/{project_id}/archive", response_model=ProjectResponse)
async def archive_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Archive a project by marking it completed."""
    project = await _require_project(db, user_id, project_id)
    project.status = ProjectStatus.COMPLETED
    await db.commit()
    await db.refresh(project)
    return _project_to_response(project, await _item_count(db, project_id))


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a project with its context items and artifacts.

    Conversations that reference it are kept with their history. Since every
    context item goes with the project, they continue without grounding.
    """
    project = await _require_project(db, user_id, project_id)
    await db.delete(project)
    await db.commit()

    logger.info(f"Deleted project {project_id}")
    return {"status": "deleted", "project_id": project_id}


@router.post("/{project_id}/summary", response_model=ProjectSummaryResponse)
async def summarize_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    generator: GenerationClient = Depends(get_generator),
):
    """Generate and store an AI summary of the project and its context."""
    try:
        summary = await generate_project_summary(db, user_id, project_id, generator)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e
    return ProjectSummaryResponse(project_id=project_id, context_summary=summary)


@router.get("/{project_id}/artifacts", response_model=ArtifactListResponse)
async def list_artifacts(
    project_id: str,
    tool: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """List stored tool outputs for a project, newest first."""
    await _require_project(db, user_id, project_id)

    stmt = select(GeneratedArtifact).where(
        GeneratedArtifact.project_id == project_id,
        GeneratedArtifact.user_id == user_id,
    )
    if tool:
        stmt = stmt.where(GeneratedArtifact.tool_kind == tool)
    result = await db.execute(stmt.order_by(GeneratedArtifact.created_at.desc()))
    artifacts = [ArtifactResponse.model_validate(a) for a in result.scalars().all()]
    return ArtifactListResponse(artifacts=artifacts, total=len(artifacts))
