"""
Record Access

Owner-scoped reads shared by the engine and the API. Nothing here joins;
callers compose records from separate reads. "Not found" is returned as
None so each caller decides whether it is fatal.
"""
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Project, ContextItem, Persona, Conversation, Message
from ..grounding import GroundingDocument, build_grounding


async def get_project(db: AsyncSession, user_id: str, project_id: str) -> Optional[Project]:
    """Get a project owned by the user."""
    stmt = select(Project).where(Project.id == project_id, Project.user_id == user_id)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def list_context_items(db: AsyncSession, project_id: str) -> List[ContextItem]:
    """All context items of a project, oldest first."""
    stmt = (
        select(ContextItem)
        .where(ContextItem.project_id == project_id)
        .order_by(ContextItem.created_at.asc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def load_grounding(db: AsyncSession, project_id: str) -> GroundingDocument:
    """Read a project's context items as they are now and render them."""
    return build_grounding(await list_context_items(db, project_id))


async def get_persona(db: AsyncSession, user_id: str, persona_id: str) -> Optional[Persona]:
    """Get a persona owned by the user."""
    stmt = select(Persona).where(Persona.id == persona_id, Persona.user_id == user_id)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def list_personas(db: AsyncSession, user_id: str) -> List[Persona]:
    """The user's personas, default first, then newest first."""
    stmt = (
        select(Persona)
        .where(Persona.user_id == user_id)
        .order_by(Persona.is_default.desc(), Persona.created_at.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_conversation(db: AsyncSession, user_id: str, conversation_id: str) -> Optional[Conversation]:
    """Get a conversation owned by the user."""
    stmt = select(Conversation).where(
        Conversation.id == conversation_id,
        Conversation.user_id == user_id,
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def list_messages(db: AsyncSession, conversation_id: str) -> List[Message]:
    """Messages of a conversation in creation order."""
    stmt = (
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.asc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())
