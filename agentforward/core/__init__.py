"""Core primitives shared across layers."""

from agentforward.core.errors import (
    AgentForwardError,
    ValidationError,
    AuthError,
    NotFound,
    StorageError,
)
from agentforward.core.locks import KeyedLock

__all__ = [
    "AgentForwardError",
    "ValidationError",
    "AuthError",
    "NotFound",
    "StorageError",
    "KeyedLock",
]
