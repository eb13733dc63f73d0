"""
Persona Schemas

Pydantic models for persona API requests and responses.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


class PersonaCreate(BaseModel):
    """Request to create a persona."""
    persona_name: str = Field(..., min_length=1, max_length=255)
    role_title: str = Field(..., min_length=1, max_length=255)
    company_or_business: Optional[str] = Field(None, max_length=255)
    industry: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    is_default: bool = False

    model_config = {"extra": "forbid"}


class PersonaUpdate(BaseModel):
    """Request to update a persona."""
    persona_name: Optional[str] = Field(None, min_length=1, max_length=255)
    role_title: Optional[str] = Field(None, min_length=1, max_length=255)
    company_or_business: Optional[str] = Field(None, max_length=255)
    industry: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    is_default: Optional[bool] = None

    model_config = {"extra": "forbid"}


class PersonaResponse(BaseModel):
    """Persona data returned from API."""
    id: str
    persona_name: str
    role_title: str
    company_or_business: Optional[str] = None
    industry: Optional[str] = None
    description: Optional[str] = None
    is_default: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PersonaListResponse(BaseModel):
    personas: List[PersonaResponse]
    total: int
