"""
Tool Workspaces

State and invocation for the one-shot sales and marketing surfaces.

A workspace exists per (user, surface) for the life of the process. It holds
the selected tool, project, persona, per-tool input fields, a free-text hint
and the last result of every tool, so switching tools and back keeps output.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..errors import ValidationFailedError, RecordNotFoundError, OperationInProgressError
from ..generation import GenerationClient
from ..grounding import enforce_grounding_limit
from ..llm import get_model_for_task
from ..models import GeneratedArtifact
from ..prompts import ToolSurface, get_tool, tools_for_surface
from ..services.records import get_project, get_persona, load_grounding
from ..tracer import trace_section, trace_input, trace_step, trace_call, trace_result
from .assembler import PromptAssembler, get_prompt_assembler

logger = logging.getLogger(__name__)


@dataclass
class ToolWorkspace:
    """Session state of one tool surface for one user."""
    surface: ToolSurface
    selected_tool: str
    project_id: Optional[str] = None
    persona_id: Optional[str] = None
    hint: str = ""
    fields: Dict[str, Dict[str, str]] = field(default_factory=dict)
    results: Dict[str, str] = field(default_factory=dict)
    generating: bool = False
    cancel_token: Optional[asyncio.Event] = field(default=None, repr=False)

    @property
    def current_result(self) -> Optional[str]:
        return self.results.get(self.selected_tool)

    def fields_for(self, kind: str) -> Dict[str, str]:
        return self.fields.setdefault(kind, {})


class WorkspaceRegistry:
    """In-memory workspaces keyed by (user_id, surface)."""

    def __init__(self):
        self._workspaces: Dict[Tuple[str, ToolSurface], ToolWorkspace] = {}

    def get(self, user_id: str, surface: ToolSurface) -> ToolWorkspace:
        key = (user_id, surface)
        if key not in self._workspaces:
            tools = tools_for_surface(surface)
            if not tools:
                raise ValidationFailedError(f"No tools are available on the {surface.value} surface")
            self._workspaces[key] = ToolWorkspace(surface=surface, selected_tool=tools[0].kind)
        return self._workspaces[key]

    def reset(self, user_id: str, surface: ToolSurface) -> None:
        self._workspaces.pop((user_id, surface), None)


_registry: Optional[WorkspaceRegistry] = None


def get_workspace_registry() -> WorkspaceRegistry:
    """Get or create the global workspace registry."""
    global _registry
    if _registry is None:
        _registry = WorkspaceRegistry()
    return _registry


class ToolRunner:
    """Runs one-shot tools for one user within one database session."""

    def __init__(
        self,
        db: AsyncSession,
        user_id: str,
        generator: GenerationClient,
        assembler: Optional[PromptAssembler] = None,
        registry: Optional[WorkspaceRegistry] = None,
    ):
        self.db = db
        self.user_id = user_id
        self.generator = generator
        self.assembler = assembler or get_prompt_assembler()
        self.registry = registry or get_workspace_registry()

    def workspace(self, surface: ToolSurface) -> ToolWorkspace:
        return self.registry.get(self.user_id, surface)

    def select_tool(self, surface: ToolSurface, kind: str) -> ToolWorkspace:
        """Switch the active tool; its cached result (if any) becomes current."""
        spec = get_tool(kind)
        if spec.surface != surface:
            raise ValidationFailedError(f"{spec.name} is not available on the {surface.value} surface")
        workspace = self.workspace(surface)
        workspace.selected_tool = kind
        return workspace

    def update(
        self,
        surface: ToolSurface,
        *,
        project_id: Optional[str] = None,
        persona_id: Optional[str] = None,
        clear_persona: bool = False,
        hint: Optional[str] = None,
        fields: Optional[Mapping[str, str]] = None,
    ) -> ToolWorkspace:
        """Change selections. Fields apply to the currently selected tool."""
        workspace = self.workspace(surface)
        if project_id is not None:
            workspace.project_id = project_id or None
        if clear_persona:
            workspace.persona_id = None
        elif persona_id is not None:
            workspace.persona_id = persona_id or None
        if hint is not None:
            workspace.hint = hint
        if fields is not None:
            workspace.fields_for(workspace.selected_tool).update(
                {name: value for name, value in fields.items() if value is not None}
            )
        return workspace

    async def generate(self, surface: ToolSurface, cancel: Optional[asyncio.Event] = None) -> str:
        """
        Generate output for the selected tool and cache it under the tool kind.

        Validation happens before any network call. On generation failure or
        cancellation the cache keeps its previous value and the error propagates.
        """
        workspace = self.workspace(surface)
        spec = get_tool(workspace.selected_tool)

        if not workspace.project_id:
            raise ValidationFailedError("Please select a project first")
        tool_fields = spec.validate_fields(workspace.fields.get(spec.kind))

        if workspace.generating:
            raise OperationInProgressError(f"{spec.name} is already generating")
        workspace.generating = True
        token = cancel if cancel is not None else asyncio.Event()
        workspace.cancel_token = token

        trace_section(f"{spec.name} Generation")
        trace_input("engine.tools", "tool", spec.kind)
        trace_input("engine.tools", "project_id", workspace.project_id)
        try:
            project = await get_project(self.db, self.user_id, workspace.project_id)
            if project is None:
                raise RecordNotFoundError("Project", workspace.project_id)

            persona = None
            if workspace.persona_id:
                persona = await get_persona(self.db, self.user_id, workspace.persona_id)
                if persona is None:
                    logger.warning(f"Persona {workspace.persona_id} not found; generating without role framing")
                    workspace.persona_id = None

            trace_step("engine.tools", "Building grounding document")
            grounding = await load_grounding(self.db, project.id)
            enforce_grounding_limit(grounding, settings.grounding_max_chars)
            if not grounding.available:
                logger.warning(f"Generating {spec.kind} for project {project.id} with no context items")

            prompt = self.assembler.build_prompt(
                spec.kind,
                project,
                persona,
                grounding,
                user_hint=workspace.hint,
                tool_fields=tool_fields,
            )

            trace_call("engine.tools", "GenerationClient.generate", f"{len(prompt)} chars")
            text = await self.generator.generate(
                prompt,
                model=get_model_for_task("grounded_generation"),
                cancel=token,
            )
            trace_result("engine.tools", "GenerationClient.generate", True, text)

            workspace.results[spec.kind] = text
            if settings.persist_generated_artifacts:
                await self._persist(project.id, spec.kind, text, tool_fields, workspace.hint)
            return text
        finally:
            workspace.generating = False
            workspace.cancel_token = None

    def cancel(self, surface: ToolSurface) -> bool:
        """Stop the running generation before its next attempt. False if none is running."""
        workspace = self.workspace(surface)
        if workspace.cancel_token is None:
            return False
        workspace.cancel_token.set()
        logger.info(f"Cancellation requested for {workspace.selected_tool} on {surface.value}")
        return True

    async def regenerate(
        self,
        surface: ToolSurface,
        instruction: str,
        cancel: Optional[asyncio.Event] = None,
    ) -> str:
        """
        Regenerate with an extra instruction standing in for the hint.

        The stored hint is restored afterwards, whether or not generation succeeds.
        """
        instruction = (instruction or "").strip()
        if not instruction:
            raise ValidationFailedError("An additional instruction is required to regenerate")

        workspace = self.workspace(surface)
        original_hint = workspace.hint
        workspace.hint = instruction
        try:
            return await self.generate(surface, cancel=cancel)
        finally:
            workspace.hint = original_hint

    async def _persist(
        self,
        project_id: str,
        tool_kind: str,
        content: str,
        tool_fields: Mapping[str, str],
        hint: str,
    ) -> None:
        artifact = GeneratedArtifact(
            project_id=project_id,
            user_id=self.user_id,
            tool_kind=tool_kind,
            content=content,
            artifact_metadata={"fields": dict(tool_fields), "hint": hint or None},
        )
        self.db.add(artifact)
        await self.db.commit()
        logger.info(f"Stored {tool_kind} artifact {artifact.id} for project {project_id}")
