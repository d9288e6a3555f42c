"""
Telemetry Reconciler

Turns the proxy engine's cycle-local counters into monotonic per-forward
traffic accounting.

The engine resets a service's counters to zero whenever the service
restarts. Each ``ready`` status event snapshots the forward's persisted
cumulative counters into the cycle cache; each ``stats`` event adds that
offset back to the reported counters, records the delta against the
persisted values and stores the new cumulative totals.
"""

from datetime import datetime
from typing import Callable, Optional, Sequence, Union

import structlog

from agentforward.core.errors import AuthError, ValidationError
from agentforward.core.locks import KeyedLock
from agentforward.domain.entities import Forward, TrafficRecord
from agentforward.domain.entities.forward import utcnow
from agentforward.domain.value_objects import naming
from agentforward.infrastructure.persistence import (
    AgentRepository,
    ForwardRepository,
    TrafficStore,
)
from agentforward.infrastructure.security import SignatureCodec
from agentforward.telemetry.cycle_cache import CycleCache, CycleSnapshot
from agentforward.telemetry.schemas import ObserverBatch, ObserverEvent, ServiceStats

logger = structlog.get_logger(__name__)


class TelemetryReconciler:
    """
    Applies signed observer batches to forward counters.

    Events are applied one by one in array order. A failure part way
    through leaves the events already applied in place; the engine
    redelivers on its own schedule and the freshness guard drops stale
    stats.
    """

    def __init__(
        self,
        forwards: ForwardRepository,
        agents: AgentRepository,
        cycle_cache: CycleCache,
        traffic_store: TrafficStore,
        signatures: Optional[SignatureCodec] = None,
        clock: Callable[[], datetime] = utcnow,
        locks: Optional[KeyedLock] = None,
    ):
        self.forwards = forwards
        self.agents = agents
        self.cycle_cache = cycle_cache
        self.traffic_store = traffic_store
        self.signatures = signatures or SignatureCodec()
        self.clock = clock
        self._locks = locks or KeyedLock()

    async def handle(
        self,
        batch: Union[ObserverBatch, Sequence[ObserverEvent]],
        signature: Optional[str],
    ) -> dict:
        """
        Process one observer batch.

        Args:
            batch: Events pushed by the engine
            signature: The ``sign`` credential from the callback URL

        Returns:
            ``{"success": True}`` once every event has been applied

        Raises:
            ValidationError: Empty batch, or first event is not a service event
            AuthError: Signature does not verify for the owning agent
            NotFound: An event references an unknown forward or agent
            StorageError: A store operation failed
        """
        events = list(batch.events if isinstance(batch, ObserverBatch) else batch)
        if not events or events[0].kind != "service":
            raise ValidationError("Invalid events")

        agent_id = await self._authenticate(events[0], signature)

        now = self.clock()
        traffic: dict[str, list[TrafficRecord]] = {}

        for event in events:
            if event.kind != "service":
                continue

            forward_id = self._forward_id(event)
            forward = await self.forwards.get_forward_must(forward_id)
            if forward.agent_id != agent_id:
                logger.warning(
                    "observer_event_foreign_forward",
                    forward_id=forward_id,
                    agent_id=agent_id,
                    owner=forward.agent_id,
                )
                continue

            if event.type == "status" and event.status:
                await self._apply_status(forward, event)
            elif event.type == "stats" and event.stats:
                record = await self._apply_stats(forward_id, event.stats, now)
                if record is not None:
                    traffic.setdefault(forward_id, []).append(record)

        for forward_id, records in traffic.items():
            await self.traffic_store.save_forward_traffic(forward_id, records)

        logger.debug(
            "observer_batch_processed",
            agent_id=agent_id,
            events=len(events),
            forwards_with_traffic=len(traffic),
        )
        return {"success": True}

    async def _authenticate(self, first: ObserverEvent, signature: Optional[str]) -> str:
        forward = await self.forwards.get_forward_must(self._forward_id(first))
        agent = await self.agents.get_agent_must(forward.agent_id)

        if not self.signatures.verify(agent.secret, agent.id, signature):
            raise AuthError("Invalid signature", agent_id=agent.id)
        return agent.id

    @staticmethod
    def _forward_id(event: ObserverEvent) -> str:
        try:
            return naming.forward_id_from_service(event.service)
        except ValueError as e:
            raise ValidationError(str(e), service=event.service) from e

    async def _apply_status(self, forward: Forward, event: ObserverEvent) -> None:
        state = event.status.state
        logger.debug(
            "forward_service_status",
            forward_id=forward.id,
            state=state,
            msg=event.status.msg,
        )
        if state != "ready":
            return

        # engine counters restart at zero from here on
        await self.cycle_cache.put(
            forward.id,
            CycleSnapshot(download=forward.download, upload=forward.upload),
        )

    async def _apply_stats(
        self,
        forward_id: str,
        stats: ServiceStats,
        now: datetime,
    ) -> Optional[TrafficRecord]:
        async with self._locks.hold(forward_id):
            forward = await self.forwards.get_forward_must(forward_id)
            if forward.updated_at > now:
                logger.debug(
                    "forward_stats_stale",
                    forward_id=forward_id,
                    updated_at=forward.updated_at.isoformat(),
                    batch_time=now.isoformat(),
                )
                return None

            offset = await self.cycle_cache.get(forward_id) or CycleSnapshot()
            download = stats.input_bytes + offset.download
            upload = stats.output_bytes + offset.upload

            record = TrafficRecord(
                forward_id=forward_id,
                time=now,
                download=download - forward.download,
                upload=upload - forward.upload,
            )
            if record.download < 0 or record.upload < 0:
                logger.warning(
                    "forward_traffic_regressed",
                    forward_id=forward_id,
                    download=record.download,
                    upload=record.upload,
                )

            await self.forwards.update_counters(forward_id, download, upload, now)

        return record
