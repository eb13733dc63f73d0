"""
Persona Service

Persona writes that must keep the single-default invariant: at most one
persona per user has is_default set. Unsetting the others and setting the
chosen one happen in one transaction.
"""
import logging
from typing import Any, Dict

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import RecordNotFoundError
from ..models import Persona
from .records import get_persona

logger = logging.getLogger(__name__)


async def _unset_other_defaults(db: AsyncSession, user_id: str, keep_id: str) -> None:
    await db.execute(
        update(Persona)
        .where(Persona.user_id == user_id, Persona.id != keep_id)
        .values(is_default=False)
    )


async def create_persona(db: AsyncSession, user_id: str, data: Dict[str, Any]) -> Persona:
    """Create a persona; if it is flagged default, it becomes the only default."""
    persona = Persona(user_id=user_id, **data)
    db.add(persona)
    try:
        await db.flush()
        if persona.is_default:
            await _unset_other_defaults(db, user_id, persona.id)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(persona)
    return persona


async def update_persona(db: AsyncSession, user_id: str, persona_id: str, data: Dict[str, Any]) -> Persona:
    """Update persona fields; setting is_default=True unsets every other default."""
    persona = await get_persona(db, user_id, persona_id)
    if persona is None:
        raise RecordNotFoundError("Persona", persona_id)

    try:
        for field, value in data.items():
            setattr(persona, field, value)
        if data.get("is_default"):
            await _unset_other_defaults(db, user_id, persona.id)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(persona)
    return persona


async def set_default_persona(db: AsyncSession, user_id: str, persona_id: str) -> Persona:
    """
    Make one persona the user's default.

    Both steps run in the session's single transaction, so a failure leaves
    the previous default in place.
    """
    persona = await get_persona(db, user_id, persona_id)
    if persona is None:
        raise RecordNotFoundError("Persona", persona_id)

    try:
        await _unset_other_defaults(db, user_id, persona.id)
        persona.is_default = True
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(persona)
    logger.info(f"Persona {persona_id} is now the default for user {user_id}")
    return persona


async def delete_persona(db: AsyncSession, user_id: str, persona_id: str) -> None:
    """Delete a persona. Conversations keep their persona_id and fall back to no role framing."""
    persona = await get_persona(db, user_id, persona_id)
    if persona is None:
        raise RecordNotFoundError("Persona", persona_id)
    await db.delete(persona)
    await db.commit()
