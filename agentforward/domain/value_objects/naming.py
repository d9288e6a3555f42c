"""
Config Entry Naming
Encode/decode pair for the names that link forwards to proxy config entries.

    service      forward-<id>
    chain        chain-<id>
    hop          hop-<id>
    node         node-<id>
    placeholder  <id>-agentPort   (listen addr awaiting port allocation)
"""

SERVICE_PREFIX = "forward"
CHAIN_PREFIX = "chain"
HOP_PREFIX = "hop"
NODE_PREFIX = "node"
PLACEHOLDER_SUFFIX = "agentPort"


def service_name(forward_id: str) -> str:
    return f"{SERVICE_PREFIX}-{forward_id}"


def chain_name(forward_id: str) -> str:
    return f"{CHAIN_PREFIX}-{forward_id}"


def hop_name(forward_id: str) -> str:
    return f"{HOP_PREFIX}-{forward_id}"


def node_name(forward_id: str) -> str:
    return f"{NODE_PREFIX}-{forward_id}"


def placeholder_addr(forward_id: str) -> str:
    """Listen address used until the agent reports an allocated port."""
    return f"{forward_id}-{PLACEHOLDER_SUFFIX}"


def listen_addr(port: int) -> str:
    return f":{port}"


def forward_id_from_service(name: str) -> str:
    """
    Decode the forward id from a service name.

    Everything after the first ``-`` is the id, so ids that contain dashes
    (UUIDs) survive the round trip.

    Raises:
        ValueError: If the name carries no id
    """
    _, sep, forward_id = name.partition("-")
    if not sep or not forward_id:
        raise ValueError(f"Service name has no forward id: {name!r}")
    return forward_id
