# LeadLens Models
from .project import Project, ProjectPriority, ProjectStatus
from .context_item import ContextItem, ContentKind
from .persona import Persona
from .conversation import Conversation, Message, MessageRole
from .artifact import GeneratedArtifact

__all__ = [
    "Project",
    "ProjectPriority",
    "ProjectStatus",
    "ContextItem",
    "ContentKind",
    "Persona",
    "Conversation",
    "Message",
    "MessageRole",
    "GeneratedArtifact",
]
