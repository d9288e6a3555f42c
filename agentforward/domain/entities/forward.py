"""
Forward Entity
A logical rule routing traffic from an agent-exposed port to a target.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_time(value) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class ForwardOptions:
    """
    Forwarding options.

    Attributes:
        channel: Transport channel between hops (tcp, tls, ws, ...)
        listen: Listen mode of the agent-side service
        forward: Forward protocol; ``tcp`` means direct forwarding
    """

    channel: Optional[str] = None
    listen: Optional[str] = None
    forward: str = "tcp"

    @property
    def is_direct(self) -> bool:
        """Direct TCP forwarding needs no chain."""
        return self.forward == "tcp"

    def to_dict(self) -> dict:
        return {
            "channel": self.channel,
            "listen": self.listen,
            "forward": self.forward,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ForwardOptions":
        data = data or {}
        return cls(
            channel=data.get("channel"),
            listen=data.get("listen"),
            forward=data.get("forward") or "tcp",
        )


@dataclass
class Forward:
    """
    Entity representing a forwarding rule owned by one agent.

    Cumulative ``download``/``upload`` count bytes since the forward was
    created. They are only advanced by the telemetry reconciler.
    """

    id: str
    agent_id: str
    target: str
    target_port: int
    agent_port: int = 0
    options: ForwardOptions = field(default_factory=ForwardOptions)
    download: int = 0
    upload: int = 0
    used_traffic: int = 0
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def create(
        cls,
        agent_id: str,
        target: str,
        target_port: int,
        agent_port: int = 0,
        options: Optional[ForwardOptions] = None,
    ) -> "Forward":
        """
        Factory method to create a forward with zeroed counters.

        Args:
            agent_id: Owning agent
            target: Target host (hostname, IPv4 or IPv6 literal)
            target_port: Target port
            agent_port: Exposed port, 0 while unallocated
            options: Forwarding options

        Returns:
            New Forward instance
        """
        return cls(
            id=uuid4().hex,
            agent_id=agent_id,
            target=target,
            target_port=target_port,
            agent_port=agent_port,
            options=options or ForwardOptions(),
        )

    @property
    def has_agent_port(self) -> bool:
        return self.agent_port != 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "agent_id": self.agent_id,
            "target": self.target,
            "target_port": self.target_port,
            "agent_port": self.agent_port,
            "options": self.options.to_dict(),
            "download": self.download,
            "upload": self.upload,
            "used_traffic": self.used_traffic,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Forward":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            agent_id=data["agent_id"],
            target=data["target"],
            target_port=int(data["target_port"]),
            agent_port=int(data.get("agent_port", 0)),
            options=ForwardOptions.from_dict(data.get("options")),
            download=int(data.get("download", 0)),
            upload=int(data.get("upload", 0)),
            used_traffic=int(data.get("used_traffic", 0)),
            created_at=_parse_time(data["created_at"]),
            updated_at=_parse_time(data["updated_at"]),
        )
