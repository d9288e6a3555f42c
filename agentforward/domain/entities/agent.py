"""
Agent Entity
A remote host running the proxy engine on behalf of the control plane.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ConnectConfig:
    """Connection settings shared with the agent."""

    secret: str

    def to_dict(self) -> dict:
        return {"secret": self.secret}


@dataclass
class Agent:
    """Entity representing an agent and its shared secret."""

    id: str
    connect_config: ConnectConfig
    name: Optional[str] = None
    metadata: dict = field(default_factory=dict)

    @property
    def secret(self) -> str:
        return self.connect_config.secret

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "connect_config": self.connect_config.to_dict(),
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Agent":
        return cls(
            id=data["id"],
            name=data.get("name"),
            connect_config=ConnectConfig(secret=data["connect_config"]["secret"]),
            metadata=data.get("metadata") or {},
        )
