# API Routes
from .projects import router as projects_router
from .context import router as context_router
from .personas import router as personas_router
from .conversations import router as conversations_router
from .tools import router as tools_router

__all__ = [
    "projects_router",
    "context_router",
    "personas_router",
    "conversations_router",
    "tools_router",
]
