"""
Domain Errors

Raised by the engine layer and translated to HTTP responses by the routers.
"""


class LeadLensError(Exception):
    """Base exception for domain errors."""
    pass


class ValidationFailedError(LeadLensError):
    """A required input is missing or empty. Raised before any network call."""
    pass


class RecordNotFoundError(LeadLensError):
    """A record does not exist or is not owned by the caller."""

    def __init__(self, record_type: str, record_id: str):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(f"{record_type} not found: {record_id}")


class OperationInProgressError(LeadLensError):
    """The same operation is already running for this conversation or workspace."""
    pass


class GroundingLoadingError(LeadLensError):
    """Grounding for the conversation is still being loaded."""
    pass


class GroundingTooLargeError(LeadLensError):
    """The grounding document exceeds the configured ceiling."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"Project context is {size} characters, above the {limit} character limit. "
            "Remove or shorten context items before generating."
        )
