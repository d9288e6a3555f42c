"""Telemetry - Observer callback ingestion and traffic reconciliation."""

from agentforward.telemetry.cycle_cache import CycleCache, CycleSnapshot
from agentforward.telemetry.reconciler import TelemetryReconciler
from agentforward.telemetry.schemas import (
    ObserverBatch,
    ObserverEvent,
    ServiceStats,
    ServiceStatus,
)

__all__ = [
    "CycleCache",
    "CycleSnapshot",
    "TelemetryReconciler",
    "ObserverBatch",
    "ObserverEvent",
    "ServiceStats",
    "ServiceStatus",
]
