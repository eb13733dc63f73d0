"""
Tool Schemas

Pydantic models for the sales and marketing tool surfaces.
"""
from typing import Optional, List, Dict
from pydantic import BaseModel, Field


class ToolFieldInfo(BaseModel):
    name: str
    label: str
    required: bool = False
    default: Optional[str] = None
    choices: List[str] = []
    multiline: bool = False


class ToolInfo(BaseModel):
    """One entry of a surface catalog."""
    kind: str
    name: str
    description: str
    fields: List[ToolFieldInfo] = []


class ToolCatalogResponse(BaseModel):
    surface: str
    tools: List[ToolInfo]


class WorkspaceUpdate(BaseModel):
    """
    Change workspace selections.

    Omitted keys are left alone. `tool` switches the active tool before the
    other changes apply, so `fields` always target the tool that ends up
    selected. An empty `persona_id` clears the persona.
    """
    tool: Optional[str] = None
    project_id: Optional[str] = None
    persona_id: Optional[str] = None
    hint: Optional[str] = None
    fields: Optional[Dict[str, str]] = None

    model_config = {"extra": "forbid"}


class WorkspaceResponse(BaseModel):
    """Current workspace state, including the active tool's cached output."""
    surface: str
    selected_tool: str
    project_id: Optional[str] = None
    persona_id: Optional[str] = None
    hint: str = ""
    fields: Dict[str, str] = {}
    result: Optional[str] = None
    cached_tools: List[str] = []
    generating: bool = False


class RegenerateRequest(BaseModel):
    instruction: str = Field(..., min_length=1)

    model_config = {"extra": "forbid"}


class GenerateResponse(BaseModel):
    tool: str
    content: str


class CachedResultsResponse(BaseModel):
    """Every output generated in this workspace, keyed by tool kind."""
    surface: str
    results: Dict[str, str]
