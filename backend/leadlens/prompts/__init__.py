# Prompt Templates
from .catalog import ToolField, ToolSpec, ToolSurface, get_tool, tools_for_surface
from .assistant import ASSISTANT_KIND

__all__ = [
    "ToolField",
    "ToolSpec",
    "ToolSurface",
    "get_tool",
    "tools_for_surface",
    "ASSISTANT_KIND",
]
