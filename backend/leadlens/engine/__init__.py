# Engine Modules
from .assembler import PromptAssembler, get_prompt_assembler
from .conversation import (
    ConversationManager,
    ConversationState,
    ConversationView,
    SendResult,
    get_conversation_activity,
)
from .tools import ToolRunner, ToolWorkspace, get_workspace_registry

__all__ = [
    "PromptAssembler",
    "get_prompt_assembler",
    "ConversationManager",
    "ConversationState",
    "ConversationView",
    "SendResult",
    "get_conversation_activity",
    "ToolRunner",
    "ToolWorkspace",
    "get_workspace_registry",
]
