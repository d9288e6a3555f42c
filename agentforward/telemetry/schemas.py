"""
Observer Payload Schemas
Telemetry events pushed by the proxy engine's http observer plugin.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt
from pydantic.alias_generators import to_camel


class ServiceStatus(BaseModel):
    """Lifecycle state of a service."""

    state: Literal["running", "ready", "failed", "closed"]
    msg: str = ""


class ServiceStats(BaseModel):
    """Cycle-local cumulative counters reported by the engine."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_conns: PositiveInt
    current_conns: NonNegativeInt
    input_bytes: NonNegativeInt
    output_bytes: NonNegativeInt
    total_errs: NonNegativeInt


class ObserverEvent(BaseModel):
    """One observation from the engine."""

    model_config = ConfigDict(extra="ignore")

    kind: Literal["service", "handler"]
    service: str
    type: Literal["status", "stats"]
    status: Optional[ServiceStatus] = None
    stats: Optional[ServiceStats] = None


class ObserverBatch(BaseModel):
    """Batch body POSTed to the observer callback."""

    events: list[ObserverEvent] = Field(default_factory=list)
