"""
Config Compiler

Pure transforms from forwards to proxy engine config entries. Every function
takes a document and returns a new one; persistence is the caller's job.
"""

from agentforward.domain.entities import Forward
from agentforward.domain.value_objects import format_host_port, naming
from agentforward.proxy.document import (
    Chain,
    Connector,
    Dialer,
    Forwarder,
    Handler,
    Hop,
    Listener,
    Node,
    Observer,
    Plugin,
    ProxyConfigDocument,
    Service,
    TLS,
)

DEFAULT_OBSERVER = "agent-observer"
DEFAULT_CHANNEL = "tcp"


def build_service(forward: Forward, observer: str = DEFAULT_OBSERVER) -> Service:
    """Build the listening service for a forward, without its routing."""
    options = forward.options
    listen_tcp = options.listen == "tcp"

    if forward.has_agent_port:
        addr = naming.listen_addr(forward.agent_port)
    else:
        addr = naming.placeholder_addr(forward.id)

    return Service(
        name=naming.service_name(forward.id),
        addr=addr,
        observer=observer,
        handler=Handler(type="tcp" if listen_tcp else "relay"),
        listener=Listener(
            type="tcp" if listen_tcp else (options.channel or DEFAULT_CHANNEL),
        ),
        metadata={"enableStats": True},
    )


def build_chain(forward: Forward) -> Chain:
    """Build the single-hop relay chain for an indirect forward."""
    return Chain(
        name=naming.chain_name(forward.id),
        hops=[
            Hop(
                name=naming.hop_name(forward.id),
                nodes=[
                    Node(
                        name=naming.node_name(forward.id),
                        addr=format_host_port(forward.target, forward.target_port),
                        connector=Connector(type="relay"),
                        dialer=Dialer(
                            type=forward.options.channel or DEFAULT_CHANNEL,
                            tls=TLS(server_name=forward.target),
                        ),
                    )
                ],
            )
        ],
    )


def build_forwarder(forward: Forward) -> Forwarder:
    """Build the direct tcp forwarder for a direct forward."""
    return Forwarder(
        nodes=[
            Node(
                name=naming.node_name(forward.id),
                addr=format_host_port(forward.target, forward.target_port),
                connector=Connector(type="tcp"),
            )
        ]
    )


def add_forward(
    document: ProxyConfigDocument,
    forward: Forward,
    observer: str = DEFAULT_OBSERVER,
) -> ProxyConfigDocument:
    """
    Add a forward's service (and chain, if indirect) to a document.

    Entries already carrying the forward's names are replaced, so adding
    the same forward twice leaves one service and at most one chain.
    """
    document = remove_forward(document, forward)
    service = build_service(forward, observer=observer)

    if forward.options.is_direct:
        service.forwarder = build_forwarder(forward)
    else:
        chain = build_chain(forward)
        document.chains = [*(document.chains or []), chain]
        service.handler.chain = chain.name

    document.services = [*(document.services or []), service]
    return document


def remove_forward(
    document: ProxyConfigDocument,
    forward: Forward,
) -> ProxyConfigDocument:
    """Drop the forward's service and chain. No-op without services."""
    document = document.model_copy(deep=True)
    if document.services is None:
        return document

    service = naming.service_name(forward.id)
    chain = naming.chain_name(forward.id)
    document.services = [s for s in document.services if s.name != service]
    if document.chains is not None:
        document.chains = [c for c in document.chains if c.name != chain]
    return document


def update_allocated_port(
    document: ProxyConfigDocument,
    forward: Forward,
) -> ProxyConfigDocument:
    """
    Resolve the placeholder listen address once the agent port is known.

    Only a service still holding the placeholder is rewritten; an already
    resolved service is left alone, so repeated calls are no-ops.
    """
    document = document.model_copy(deep=True)
    if not forward.has_agent_port:
        return document

    name = naming.service_name(forward.id)
    placeholder = naming.placeholder_addr(forward.id)
    for service in document.services or []:
        if service.name == name and service.addr == placeholder:
            service.addr = naming.listen_addr(forward.agent_port)
    return document


def set_observer(
    document: ProxyConfigDocument,
    callback_url: str,
    name: str = DEFAULT_OBSERVER,
) -> ProxyConfigDocument:
    """Install exactly one http observer pointing at the callback URL."""
    document = document.model_copy(deep=True)
    document.observers = [
        Observer(name=name, plugin=Plugin(type="http", addr=callback_url)),
    ]
    return document
