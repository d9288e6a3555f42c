"""Domain Value Objects - Immutable naming and addressing helpers."""

from agentforward.domain.value_objects.address import is_ipv6, format_host_port
from agentforward.domain.value_objects import naming

__all__ = [
    "is_ipv6",
    "format_host_port",
    "naming",
]
