"""
AgentForward Proxy Module

Compiles forwards into the proxy engine's declarative configuration and
distributes the result to agents.
"""

from agentforward.proxy.document import ProxyConfigDocument
from agentforward.proxy.distributor import ConfigDistributor, AgentTask
from agentforward.proxy.service import ForwardConfigService

__all__ = [
    "ProxyConfigDocument",
    "ConfigDistributor",
    "AgentTask",
    "ForwardConfigService",
]
