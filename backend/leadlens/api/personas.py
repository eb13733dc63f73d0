"""
Personas API

Endpoints for the user's role framings.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.persona import PersonaCreate, PersonaUpdate, PersonaResponse, PersonaListResponse
from ..services import create_persona, update_persona, set_default_persona, delete_persona
from ..services.records import get_persona as fetch_persona, list_personas as fetch_personas
from .deps import DOMAIN_ERRORS, get_current_user_id, to_http_error

router = APIRouter(prefix="/personas", tags=["personas"])


@router.post("", response_model=PersonaResponse)
async def add_persona(
    data: PersonaCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Create a persona. A default persona replaces the previous default."""
    persona = await create_persona(db, user_id, data.model_dump())
    return PersonaResponse.model_validate(persona)


@router.get("", response_model=PersonaListResponse)
async def list_personas(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """List personas, default first."""
    personas = [PersonaResponse.model_validate(p) for p in await fetch_personas(db, user_id)]
    return PersonaListResponse(personas=personas, total=len(personas))


@router.get("/{persona_id}", response_model=PersonaResponse)
async def get_persona(
    persona_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    persona = await fetch_persona(db, user_id, persona_id)
    if not persona:
        raise HTTPException(status_code=404, detail="Persona not found")
    return PersonaResponse.model_validate(persona)


@router.patch("/{persona_id}", response_model=PersonaResponse)
async def edit_persona(
    persona_id: str,
    data: PersonaUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Update a persona."""
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    try:
        persona = await update_persona(db, user_id, persona_id, changes)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e
    return PersonaResponse.model_validate(persona)


@router.post("/{persona_id}/default", response_model=PersonaResponse)
async def make_default(
    persona_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Make this persona the only default."""
    try:
        persona = await set_default_persona(db, user_id, persona_id)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e
    return PersonaResponse.model_validate(persona)


@router.delete("/{persona_id}")
async def remove_persona(
    persona_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        await delete_persona(db, user_id, persona_id)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e
    return {"status": "deleted", "persona_id": persona_id}
