"""Domain Entities - Core business objects."""

from agentforward.domain.entities.forward import Forward, ForwardOptions
from agentforward.domain.entities.agent import Agent, ConnectConfig
from agentforward.domain.entities.traffic_record import TrafficRecord

__all__ = [
    "Forward",
    "ForwardOptions",
    "Agent",
    "ConnectConfig",
    "TrafficRecord",
]
