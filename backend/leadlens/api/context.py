"""
Context API

Endpoints for a project's grounding context items.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models import ContextItem
from ..schemas.context import (
    ContextItemCreate,
    ContextItemResponse,
    ContextItemListResponse,
    GroundingPreviewResponse,
)
from ..services.records import get_project, list_context_items, load_grounding
from ..tracer import trace_section, trace_input, trace_output
from .deps import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects/{project_id}/context", tags=["context"])


async def _require_project(db: AsyncSession, user_id: str, project_id: str):
    project = await get_project(db, user_id, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post("", response_model=ContextItemResponse)
async def add_context_item(
    project_id: str,
    data: ContextItemCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Attach a text, url, image or document item to a project."""
    await _require_project(db, user_id, project_id)

    trace_section("Add Context Item")
    trace_input("api.context", "content_type", data.content_type.value)
    trace_input("api.context", "content", data.content)

    item = ContextItem(
        project_id=project_id,
        content_type=data.content_type,
        content=data.content,
        item_metadata=data.metadata,
    )
    db.add(item)
    await db.commit()
    await db.refresh(item)

    logger.info(f"Added {item.content_type.value} context item {item.id} to project {project_id}")
    return ContextItemResponse.model_validate(item)


@router.get("", response_model=ContextItemListResponse)
async def list_items(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """List a project's context items, oldest first."""
    await _require_project(db, user_id, project_id)
    items = [ContextItemResponse.model_validate(i) for i in await list_context_items(db, project_id)]
    return ContextItemListResponse(items=items, total=len(items))


@router.delete("/{item_id}")
async def delete_context_item(
    project_id: str,
    item_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Remove a context item. The next generation no longer sees it."""
    await _require_project(db, user_id, project_id)

    stmt = select(ContextItem).where(
        ContextItem.id == item_id,
        ContextItem.project_id == project_id,
    )
    result = await db.execute(stmt)
    item = result.scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Context item not found")

    await db.delete(item)
    await db.commit()
    return {"status": "deleted", "item_id": item_id}


@router.get("/grounding", response_model=GroundingPreviewResponse)
async def preview_grounding(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """The grounding document as the next generation would receive it."""
    await _require_project(db, user_id, project_id)
    grounding = await load_grounding(db, project_id)
    trace_output("api.context", "grounding", grounding.text)
    return GroundingPreviewResponse(
        project_id=project_id,
        text=grounding.text,
        item_count=grounding.item_count,
        available=grounding.available,
        warning=grounding.warning,
    )
