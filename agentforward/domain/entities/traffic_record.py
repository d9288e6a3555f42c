"""
Traffic Record Entity
Append-only delta of bytes attributed to a forward over one stats interval.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TrafficRecord:
    """
    Immutable traffic delta.

    Attributes:
        forward_id: Forward the traffic belongs to
        time: Batch processing time
        download: Bytes downloaded since the previous stats event
        upload: Bytes uploaded since the previous stats event
    """

    forward_id: str
    time: datetime
    download: int
    upload: int

    def to_dict(self) -> dict:
        return {
            "forward_id": self.forward_id,
            "time": self.time.isoformat(),
            "download": self.download,
            "upload": self.upload,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TrafficRecord":
        return cls(
            forward_id=data["forward_id"],
            time=datetime.fromisoformat(data["time"]),
            download=int(data["download"]),
            upload=int(data["upload"]),
        )
