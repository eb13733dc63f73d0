"""
Tools API

Endpoints for the sales and marketing one-shot tool surfaces.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..engine.assembler import PromptAssembler
from ..engine.tools import ToolRunner, ToolWorkspace, WorkspaceRegistry
from ..generation import GenerationClient
from ..prompts import ToolSurface, tools_for_surface
from ..schemas.tools import (
    ToolFieldInfo,
    ToolInfo,
    ToolCatalogResponse,
    WorkspaceUpdate,
    WorkspaceResponse,
    RegenerateRequest,
    GenerateResponse,
    CachedResultsResponse,
)
from .deps import (
    DOMAIN_ERRORS,
    get_current_user_id,
    get_generator,
    get_assembler,
    get_registry,
    to_http_error,
)

router = APIRouter(prefix="/tools/{surface}", tags=["tools"])

ONE_SHOT_SURFACES = (ToolSurface.SALES, ToolSurface.MARKETING)


def _check_surface(surface: ToolSurface) -> ToolSurface:
    if surface not in ONE_SHOT_SURFACES:
        raise HTTPException(status_code=404, detail=f"No tool workspace for {surface.value}")
    return surface


def get_runner(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    generator: GenerationClient = Depends(get_generator),
    assembler: PromptAssembler = Depends(get_assembler),
    registry: WorkspaceRegistry = Depends(get_registry),
) -> ToolRunner:
    return ToolRunner(db, user_id, generator, assembler=assembler, registry=registry)


def _workspace_to_response(workspace: ToolWorkspace) -> WorkspaceResponse:
    return WorkspaceResponse(
        surface=workspace.surface.value,
        selected_tool=workspace.selected_tool,
        project_id=workspace.project_id,
        persona_id=workspace.persona_id,
        hint=workspace.hint,
        fields=dict(workspace.fields.get(workspace.selected_tool, {})),
        result=workspace.current_result,
        cached_tools=sorted(workspace.results),
        generating=workspace.generating,
    )


@router.get("", response_model=ToolCatalogResponse)
async def get_catalog(surface: ToolSurface):
    """List the tools available on a surface."""
    _check_surface(surface)
    tools = [
        ToolInfo(
            kind=spec.kind,
            name=spec.name,
            description=spec.description,
            fields=[
                ToolFieldInfo(
                    name=f.name,
                    label=f.label,
                    required=f.required,
                    default=f.default,
                    choices=list(f.choices),
                    multiline=f.multiline,
                )
                for f in spec.fields
            ],
        )
        for spec in tools_for_surface(surface)
    ]
    return ToolCatalogResponse(surface=surface.value, tools=tools)


@router.get("/workspace", response_model=WorkspaceResponse)
async def get_workspace(
    surface: ToolSurface,
    runner: ToolRunner = Depends(get_runner),
):
    """Current selections and the active tool's cached output."""
    _check_surface(surface)
    return _workspace_to_response(runner.workspace(surface))


@router.patch("/workspace", response_model=WorkspaceResponse)
async def update_workspace(
    surface: ToolSurface,
    data: WorkspaceUpdate,
    runner: ToolRunner = Depends(get_runner),
):
    """Select a tool, project or persona, or edit the hint and tool fields."""
    _check_surface(surface)
    try:
        if data.tool is not None:
            runner.select_tool(surface, data.tool)
        workspace = runner.update(
            surface,
            project_id=data.project_id,
            persona_id=data.persona_id,
            clear_persona=data.persona_id == "",
            hint=data.hint,
            fields=data.fields,
        )
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e
    return _workspace_to_response(workspace)


@router.post("/generate", response_model=GenerateResponse)
async def generate(
    surface: ToolSurface,
    runner: ToolRunner = Depends(get_runner),
):
    """Generate output for the selected tool."""
    _check_surface(surface)
    try:
        content = await runner.generate(surface)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e
    return GenerateResponse(tool=runner.workspace(surface).selected_tool, content=content)


@router.post("/regenerate", response_model=GenerateResponse)
async def regenerate(
    surface: ToolSurface,
    data: RegenerateRequest,
    runner: ToolRunner = Depends(get_runner),
):
    """Generate again with an extra instruction in place of the saved hint."""
    _check_surface(surface)
    try:
        content = await runner.regenerate(surface, data.instruction)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e
    return GenerateResponse(tool=runner.workspace(surface).selected_tool, content=content)


@router.post("/cancel")
async def cancel(
    surface: ToolSurface,
    runner: ToolRunner = Depends(get_runner),
):
    """Cancel the generation in flight; it fails with 409 once its current attempt ends."""
    _check_surface(surface)
    return {"surface": surface.value, "cancelled": runner.cancel(surface)}


@router.get("/results", response_model=CachedResultsResponse)
async def cached_results(
    surface: ToolSurface,
    runner: ToolRunner = Depends(get_runner),
):
    """Every output generated in this workspace during the session."""
    _check_surface(surface)
    return CachedResultsResponse(surface=surface.value, results=dict(runner.workspace(surface).results))
