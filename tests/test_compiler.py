"""Tests for the pure config compiler transforms."""

import pytest

from agentforward.proxy import compiler
from agentforward.proxy.document import ProxyConfigDocument
from tests.conftest import make_forward


@pytest.fixture
def empty():
    return ProxyConfigDocument()


class TestAddForward:
    def test_direct_tcp_forward_has_no_chain(self, empty):
        forward = make_forward(forward="tcp", agent_port=10001)
        document = compiler.add_forward(empty, forward)

        assert document.chains is None
        service = document.get_service("forward-f1")
        assert service.addr == ":10001"
        assert service.handler.type == "tcp"
        assert service.handler.chain is None
        assert service.listener.type == "tcp"
        assert service.observer == "agent-observer"
        assert service.metadata == {"enableStats": True}

        node = service.forwarder.nodes[0]
        assert node.name == "node-f1"
        assert node.addr == "10.0.0.5:8080"
        assert node.connector.type == "tcp"
        assert node.dialer is None

    @pytest.mark.parametrize("protocol", ["relay", "tls", "ws"])
    def test_indirect_forward_builds_one_chain(self, empty, protocol):
        forward = make_forward(
            forward=protocol,
            listen="relay",
            channel="tls",
            target="backend.example.com",
            target_port=443,
        )
        document = compiler.add_forward(empty, forward)

        assert document.chain_names() == ["chain-f1"]
        chain = document.get_chain("chain-f1")
        assert len(chain.hops) == 1
        assert chain.hops[0].name == "hop-f1"
        assert len(chain.hops[0].nodes) == 1

        node = chain.hops[0].nodes[0]
        assert node.addr == "backend.example.com:443"
        assert node.connector.type == "relay"
        assert node.dialer.type == "tls"
        assert node.dialer.tls.server_name == "backend.example.com"

        service = document.get_service("forward-f1")
        assert service.handler.type == "relay"
        assert service.handler.chain == "chain-f1"
        assert service.listener.type == "tls"
        assert service.forwarder is None

    def test_ipv6_target_is_bracketed_in_chain_node(self, empty):
        forward = make_forward(forward="relay", listen="relay", channel="ws", target="2001:db8::1")
        document = compiler.add_forward(empty, forward)

        node = document.get_chain("chain-f1").hops[0].nodes[0]
        assert node.addr == "[2001:db8::1]:8080"
        assert node.dialer.tls.server_name == "2001:db8::1"

    def test_ipv6_target_is_bracketed_in_forwarder_node(self, empty):
        document = compiler.add_forward(empty, make_forward(target="::1"))
        assert document.get_service("forward-f1").forwarder.nodes[0].addr == "[::1]:8080"

    def test_unallocated_port_uses_placeholder(self, empty):
        document = compiler.add_forward(empty, make_forward(agent_port=0))
        assert document.get_service("forward-f1").addr == "f1-agentPort"

    def test_listener_defaults_to_tcp_channel(self, empty):
        forward = make_forward(forward="relay", listen="relay", channel=None)
        document = compiler.add_forward(empty, forward)

        service = document.get_service("forward-f1")
        assert service.listener.type == "tcp"
        assert document.get_chain("chain-f1").hops[0].nodes[0].dialer.type == "tcp"

    def test_add_does_not_mutate_input(self, empty):
        compiler.add_forward(empty, make_forward())
        assert empty.services is None

    def test_adding_twice_replaces(self, empty):
        forward = make_forward(forward="relay", listen="relay", channel="tls")
        document = compiler.add_forward(empty, forward)
        document = compiler.add_forward(document, forward)

        assert document.service_names() == ["forward-f1"]
        assert document.chain_names() == ["chain-f1"]

    def test_preserves_other_forwards(self, empty):
        document = compiler.add_forward(empty, make_forward("a"))
        document = compiler.add_forward(document, make_forward("b", forward="relay", channel="tls"))

        assert document.service_names() == ["forward-a", "forward-b"]
        assert document.chain_names() == ["chain-b"]


class TestRemoveForward:
    def test_removes_service_and_chain(self, empty):
        keep = make_forward("keep", forward="relay", channel="tls")
        drop = make_forward("drop", forward="relay", channel="tls")
        document = compiler.add_forward(compiler.add_forward(empty, keep), drop)

        document = compiler.remove_forward(document, drop)

        assert document.service_names() == ["forward-keep"]
        assert document.chain_names() == ["chain-keep"]

    def test_no_services_is_noop(self, empty):
        document = compiler.remove_forward(empty, make_forward())
        assert document.services is None
        assert document.chains is None

    def test_remove_then_add_has_no_duplicates(self, empty):
        forward = make_forward(forward="relay", channel="tls")
        document = compiler.add_forward(empty, forward)
        document = compiler.remove_forward(document, forward)
        document = compiler.add_forward(document, forward)

        names = document.service_names()
        assert names == ["forward-f1"]
        assert len(names) == len(set(names))


class TestUpdateAllocatedPort:
    def test_resolves_placeholder(self, empty):
        document = compiler.add_forward(empty, make_forward(agent_port=0))
        document = compiler.update_allocated_port(document, make_forward(agent_port=20002))
        assert document.get_service("forward-f1").addr == ":20002"

    def test_zero_port_is_noop(self, empty):
        document = compiler.add_forward(empty, make_forward(agent_port=0))
        document = compiler.update_allocated_port(document, make_forward(agent_port=0))
        assert document.get_service("forward-f1").addr == "f1-agentPort"

    def test_idempotent(self, empty):
        document = compiler.add_forward(empty, make_forward(agent_port=0))
        once = compiler.update_allocated_port(document, make_forward(agent_port=20002))
        twice = compiler.update_allocated_port(once, make_forward(agent_port=20002))
        assert once.to_dict() == twice.to_dict()

    def test_never_touches_resolved_entry(self, empty):
        document = compiler.add_forward(empty, make_forward(agent_port=10001))
        document = compiler.update_allocated_port(document, make_forward(agent_port=20002))
        assert document.get_service("forward-f1").addr == ":10001"


class TestSetObserver:
    def test_installs_single_http_observer(self, empty):
        document = compiler.set_observer(empty, "https://a/cb?sign=1")
        document = compiler.set_observer(document, "https://a/cb?sign=2")

        assert len(document.observers) == 1
        observer = document.observers[0]
        assert observer.name == "agent-observer"
        assert observer.plugin.type == "http"
        assert observer.plugin.addr == "https://a/cb?sign=2"
