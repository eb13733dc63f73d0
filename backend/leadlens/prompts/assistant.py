"""
Context Assistant Prompt

Role text for the multi-turn conversational surface.
"""
from .catalog import ToolSpec, ToolSurface, register

ASSISTANT_KIND = "assistant"

ASSISTANT_ROLE = """You are an intelligent business advisor helping with project-related questions. You have access to specific context about this project. You must base your responses EXCLUSIVELY on the information provided below."""

ASSISTANT_REQUIREMENTS = """- Answer the user's current message directly
- Keep continuity with the previous conversation when it is shown
- Give actionable advice based ONLY on the provided context"""

register(
    ToolSpec(
        kind=ASSISTANT_KIND,
        surface=ToolSurface.ASSISTANT,
        name="Context Assistant",
        description="Ask questions about a project grounded in its context",
        role=ASSISTANT_ROLE,
        requirements=ASSISTANT_REQUIREMENTS,
        instruction="Current User Message: {message}",
    ),
)
