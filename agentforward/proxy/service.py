"""
Forward Config Service

Administrative entry points that keep an agent's proxy document in step
with its forwards. Each operation resolves its forward/agent, takes the
agent's document lock, applies a compiler transform and persists.
"""

from typing import Optional

import structlog

from agentforward.core.locks import KeyedLock
from agentforward.domain.entities import Forward
from agentforward.domain.entities.forward import utcnow
from agentforward.infrastructure.persistence import AgentRepository, ForwardRepository
from agentforward.infrastructure.security import SignatureCodec
from agentforward.proxy import compiler
from agentforward.proxy.distributor import ConfigDistributor
from agentforward.proxy.document import ProxyConfigDocument

logger = structlog.get_logger(__name__)


class ForwardConfigService:
    """Compiles forwards into per-agent proxy documents."""

    def __init__(
        self,
        forwards: ForwardRepository,
        agents: AgentRepository,
        distributor: ConfigDistributor,
        signatures: Optional[SignatureCodec] = None,
        server_url: str = "http://localhost:8000",
        observer_path: str = "/api/v1/agents/observer",
        observer_name: str = compiler.DEFAULT_OBSERVER,
        locks: Optional[KeyedLock] = None,
    ):
        self.forwards = forwards
        self.agents = agents
        self.distributor = distributor
        self.signatures = signatures or SignatureCodec()
        self.server_url = server_url.rstrip("/")
        self.observer_path = observer_path
        self.observer_name = observer_name
        self._locks = locks or KeyedLock()

    async def get_config(self, agent_id: str) -> ProxyConfigDocument:
        await self.agents.get_agent_must(agent_id)
        return await self.distributor.load(agent_id)

    async def add_forward(self, forward: Forward) -> ProxyConfigDocument:
        """Compile a forward into its agent's document."""
        await self.agents.get_agent_must(forward.agent_id)

        async with self._locks.hold(forward.agent_id):
            document = await self.distributor.load(forward.agent_id)
            document = compiler.add_forward(document, forward, observer=self.observer_name)
            await self.distributor.persist(forward.agent_id, document)

        logger.info(
            "forward_added",
            forward_id=forward.id,
            agent_id=forward.agent_id,
            protocol=forward.options.forward,
            pending_port=not forward.has_agent_port,
        )
        return document

    async def remove_forward(self, forward: Forward) -> ProxyConfigDocument:
        """Remove a forward's entries from its agent's document."""
        await self.agents.get_agent_must(forward.agent_id)

        async with self._locks.hold(forward.agent_id):
            document = await self.distributor.load(forward.agent_id)
            if document.services is None:
                return document
            document = compiler.remove_forward(document, forward)
            await self.distributor.persist(forward.agent_id, document)

        logger.info("forward_removed", forward_id=forward.id, agent_id=forward.agent_id)
        return document

    async def update_allocated_port(self, forward: Forward) -> ProxyConfigDocument:
        """Replace the placeholder listen address with the allocated port."""
        await self.agents.get_agent_must(forward.agent_id)

        async with self._locks.hold(forward.agent_id):
            document = await self.distributor.load(forward.agent_id)
            if not forward.has_agent_port:
                return document
            document = compiler.update_allocated_port(document, forward)
            await self.distributor.persist(forward.agent_id, document)

        logger.info(
            "forward_port_resolved",
            forward_id=forward.id,
            agent_port=forward.agent_port,
        )
        return document

    async def set_observer(self, agent_id: str) -> ProxyConfigDocument:
        """
        Install the signed telemetry observer and distribute the document.

        The callback URL carries ``sign = Sign(agent secret, agent id)``,
        which the reconciler checks on every telemetry batch.
        """
        agent = await self.agents.get_agent_must(agent_id)
        sign = self.signatures.sign(agent.secret, agent.id)
        callback_url = f"{self.server_url}{self.observer_path}?sign={sign}"

        async with self._locks.hold(agent_id):
            document = await self.distributor.load(agent_id)
            document = compiler.set_observer(document, callback_url, name=self.observer_name)
            await self.distributor.persist(agent_id, document)

        logger.debug("observer_set", agent_id=agent_id, observer=self.observer_name)
        await self.distributor.notify_config_changed(agent_id, document)
        return document

    # =========================================================================
    # Forward lifecycle
    # =========================================================================

    async def create_forward(self, forward: Forward) -> ProxyConfigDocument:
        """Store a new forward and compile it."""
        await self.agents.get_agent_must(forward.agent_id)
        await self.forwards.save_forward(forward)
        return await self.add_forward(forward)

    async def delete_forward(self, forward_id: str) -> ProxyConfigDocument:
        """Remove a forward's config entries, then the forward itself."""
        forward = await self.forwards.get_forward_must(forward_id)
        document = await self.remove_forward(forward)
        await self.forwards.delete_forward(forward_id)
        return document

    async def allocate_port(self, forward_id: str, agent_port: int) -> ProxyConfigDocument:
        """Record the port the agent allocated and resolve the placeholder."""
        forward = await self.forwards.get_forward_must(forward_id)
        await self.forwards.update_agent_port(forward_id, agent_port, utcnow())
        forward.agent_port = agent_port
        return await self.update_allocated_port(forward)
