"""
Error Taxonomy
Exceptions raised by the compiler, the reconciler and the stores.

The core never retries or swallows these; they propagate to the API layer,
which maps them to HTTP responses.
"""

from typing import Any, Optional


class AgentForwardError(Exception):
    """Base class for all AgentForward errors."""

    code: str = "agentforward_error"
    status_code: int = 500

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict:
        """Convert to a response body."""
        return {
            "detail": self.message,
            "error": self.code,
        }


class ValidationError(AgentForwardError):
    """Malformed or empty telemetry batch, or wrong leading event kind."""

    code = "validation_error"
    status_code = 400


class AuthError(AgentForwardError):
    """Callback signature did not verify against the agent secret."""

    code = "invalid_signature"
    status_code = 401


class NotFound(AgentForwardError):
    """A referenced forward or agent does not exist."""

    code = "not_found"
    status_code = 404

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} {resource_id} not found"
        super().__init__(message, resource=resource, resource_id=resource_id)
        self.resource = resource
        self.resource_id = resource_id


class StorageError(AgentForwardError):
    """Document, cache or traffic store I/O failed."""

    code = "storage_error"
    status_code = 503
