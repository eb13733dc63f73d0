# Generation Client
from .client import GenerationClient, GenerationFailedError, GenerationCancelledError
from .factory import get_generation_client

__all__ = [
    "GenerationClient",
    "GenerationFailedError",
    "GenerationCancelledError",
    "get_generation_client",
]
