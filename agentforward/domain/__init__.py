"""
AgentForward Domain Layer
Forwards, agents, traffic records and the naming conventions that tie them
to proxy config entries.
"""

from agentforward.domain.entities import (
    Forward,
    ForwardOptions,
    Agent,
    ConnectConfig,
    TrafficRecord,
)
from agentforward.domain.value_objects import is_ipv6, format_host_port, naming

__all__ = [
    # Entities
    "Forward",
    "ForwardOptions",
    "Agent",
    "ConnectConfig",
    "TrafficRecord",
    # Value Objects
    "is_ipv6",
    "format_host_port",
    "naming",
]
