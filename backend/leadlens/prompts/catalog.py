"""
Tool Catalog

Declarative description of every generation tool: its surface, the role
and structural requirements put in the prompt, and its input fields.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

from ..errors import ValidationFailedError


class ToolSurface(str, Enum):
    """Where a tool is invoked from."""
    ASSISTANT = "assistant"
    SALES = "sales"
    MARKETING = "marketing"


@dataclass(frozen=True)
class ToolField:
    """A tool-specific input."""
    name: str
    label: str
    required: bool = False
    default: Optional[str] = None
    choices: Tuple[str, ...] = ()
    multiline: bool = False


@dataclass(frozen=True)
class ToolSpec:
    """Everything the assembler needs to know about one tool kind."""
    kind: str
    surface: ToolSurface
    name: str
    description: str
    role: str
    requirements: str
    instruction: str
    fields: Tuple[ToolField, ...] = field(default_factory=tuple)

    def validate_fields(self, values: Optional[Mapping[str, Optional[str]]]) -> Dict[str, str]:
        """
        Check required fields and choices, apply defaults.

        Returns the normalized field values (stripped, unknown keys dropped).
        """
        values = values or {}
        normalized: Dict[str, str] = {}
        for tool_field in self.fields:
            raw = values.get(tool_field.name)
            value = raw.strip() if isinstance(raw, str) else ""
            if not value and tool_field.default is not None:
                value = tool_field.default
            if tool_field.required and not value:
                raise ValidationFailedError(f"{tool_field.label} is required for {self.name}")
            if value and tool_field.choices and value not in tool_field.choices:
                raise ValidationFailedError(
                    f"{tool_field.label} must be one of: {', '.join(tool_field.choices)}"
                )
            if value:
                normalized[tool_field.name] = value
        return normalized


_REGISTRY: Dict[str, ToolSpec] = {}


def register(*specs: ToolSpec) -> None:
    for spec in specs:
        if spec.kind in _REGISTRY:
            raise ValueError(f"Duplicate tool kind: {spec.kind}")
        _REGISTRY[spec.kind] = spec


def get_tool(kind: str) -> ToolSpec:
    """Look up a tool by kind. Unknown kinds are a validation error."""
    _load_catalogs()
    try:
        return _REGISTRY[kind]
    except KeyError:
        raise ValidationFailedError(f"Unknown tool: {kind}") from None


def tools_for_surface(surface: ToolSurface) -> Tuple[ToolSpec, ...]:
    """Tools offered on a surface, in catalog order."""
    _load_catalogs()
    return tuple(spec for spec in _REGISTRY.values() if spec.surface == surface)


def _load_catalogs() -> None:
    # The catalog modules register themselves on import
    from . import assistant, sales, marketing  # noqa: F401
