"""
Prompt Assembler

Builds one prompt string per tool invocation, always in this order:
rule preamble, tool role and requirements, persona, project and grounding,
conversation history, user hint, then the instruction with a closing
restatement of the grounding constraint and the project's literal name.
"""
import logging
from typing import Any, Mapping, Optional, Sequence, Union

from ..grounding import GroundingDocument
from ..prompts import get_tool
from ..prompts.catalog import ToolSpec
from ..prompts.rules import (
    GLOBAL_RULES,
    INSUFFICIENT_CONTEXT_CLAUSE,
    NO_CONTEXT_NOTICE,
    PERSONA_BLOCK,
    PROJECT_BLOCK,
    MISSING_PROJECT_BLOCK,
    NO_PROJECT_BLOCK,
    HISTORY_HEADING,
    HINT_HEADING,
    CLOSING,
)
from ..errors import ValidationFailedError

logger = logging.getLogger(__name__)


def _or_na(value: Any) -> str:
    if value is None:
        return "N/A"
    value = getattr(value, "value", value)
    text = str(value).strip()
    return text or "N/A"


def _role_label(role: Any) -> str:
    role = getattr(role, "value", role)
    return "User" if role == "user" else "Assistant"


class PromptAssembler:
    """
    Stateless prompt builder shared by every tool surface.

    `project`, `persona` and history entries are read by attribute, so ORM
    rows and plain objects both work.
    """

    def build_prompt(
        self,
        tool_kind: str,
        project: Optional[Any],
        persona: Optional[Any],
        grounding: Union[GroundingDocument, str],
        history: Optional[Sequence[Any]] = None,
        user_hint: Optional[str] = None,
        user_instruction: Optional[str] = None,
        *,
        project_id: Optional[str] = None,
        tool_fields: Optional[Mapping[str, str]] = None,
    ) -> str:
        """
        Assemble the prompt for one generation call.

        Args:
            tool_kind: Catalog kind ("assistant", "cold-email", ...)
            project: Project record, or None when it cannot be found
            persona: Selected persona, or None for no role framing
            grounding: Output of the context normalizer
            history: Prior conversation turns, oldest first
            user_hint: Optional free text appended verbatim
            user_instruction: The user's message (assistant) or an instruction
                override (one-shot tools)
            project_id: Used to label context when the project record is missing
            tool_fields: Validated tool-specific inputs

        Returns:
            The prompt text
        """
        spec = get_tool(tool_kind)
        grounding_text = grounding.text if isinstance(grounding, GroundingDocument) else (grounding or "")
        has_grounding = bool(grounding_text.strip())

        sections = [
            GLOBAL_RULES,
            self._tool_section(spec, tool_fields),
        ]

        if persona is not None:
            sections.append(self._persona_section(persona))

        sections.append(self._project_section(project, project_id, grounding_text, has_grounding))

        if history:
            sections.append(self._history_section(history))

        if user_hint and user_hint.strip():
            sections.append(f"{HINT_HEADING}\n{user_hint}")

        sections.append(self._instruction_section(spec, user_instruction))
        sections.append(
            CLOSING.format(
                clause=INSUFFICIENT_CONTEXT_CLAUSE,
                project_name=self._project_name(project, has_grounding),
            )
        )

        prompt = "\n\n".join(sections)
        logger.debug(
            f"Assembled {tool_kind} prompt ({len(prompt)} chars, "
            f"grounding={'yes' if has_grounding else 'no'}, persona={'yes' if persona else 'no'})"
        )
        return prompt

    @staticmethod
    def _tool_section(spec: ToolSpec, tool_fields: Optional[Mapping[str, str]]) -> str:
        parts = [spec.role, spec.requirements]
        if tool_fields:
            inline = []
            blocks = []
            for tool_field in spec.fields:
                value = tool_fields.get(tool_field.name)
                if not value:
                    continue
                if tool_field.multiline:
                    blocks.append(f"{tool_field.label}:\n{value}")
                else:
                    inline.append(f"- {tool_field.label}: {value}")
            if inline:
                parts.append("Tool Inputs:\n" + "\n".join(inline))
            parts.extend(blocks)
        return "\n\n".join(parts)

    @staticmethod
    def _persona_section(persona: Any) -> str:
        return PERSONA_BLOCK.format(
            persona_name=_or_na(persona.persona_name),
            role_title=_or_na(persona.role_title),
            company=_or_na(persona.company_or_business),
            industry=_or_na(persona.industry),
            description=_or_na(persona.description),
        )

    @staticmethod
    def _project_section(
        project: Optional[Any],
        project_id: Optional[str],
        grounding_text: str,
        has_grounding: bool,
    ) -> str:
        if project is not None:
            header = PROJECT_BLOCK.format(
                name=project.name,
                description=_or_na(project.description),
                lead_source=_or_na(project.lead_source),
                priority=_or_na(project.priority),
                status=_or_na(project.status),
                summary=_or_na(project.context_summary),
            )
        elif has_grounding:
            header = MISSING_PROJECT_BLOCK.format(project_id=project_id or "N/A")
        else:
            header = NO_PROJECT_BLOCK

        if has_grounding:
            return f"{header}\n\n{grounding_text}"
        return f"{header}\n\n{NO_CONTEXT_NOTICE}"

    @staticmethod
    def _history_section(history: Sequence[Any]) -> str:
        lines = [f"{_role_label(msg.role)}: {msg.content}" for msg in history]
        return HISTORY_HEADING + "\n" + "\n".join(lines)

    @staticmethod
    def _instruction_section(spec: ToolSpec, user_instruction: Optional[str]) -> str:
        if "{message}" in spec.instruction:
            if not user_instruction or not user_instruction.strip():
                raise ValidationFailedError("A message is required")
            return spec.instruction.format(message=user_instruction)
        if user_instruction and user_instruction.strip():
            return user_instruction
        return spec.instruction

    @staticmethod
    def _project_name(project: Optional[Any], has_grounding: bool) -> str:
        if project is not None:
            return project.name
        return "Project" if has_grounding else "Unknown Project"


# Shared instance
_assembler = PromptAssembler()


def get_prompt_assembler() -> PromptAssembler:
    """Get the shared prompt assembler."""
    return _assembler
