"""Tests for the forward config service and distributor."""

import asyncio
import json

import pytest

from agentforward.core.errors import NotFound
from agentforward.infrastructure.persistence import ConfigStore
from agentforward.proxy import ConfigDistributor, compiler
from agentforward.proxy.document import ProxyConfigDocument
from tests.conftest import AGENT_ID, AGENT_SECRET, make_forward


@pytest.mark.asyncio
async def test_add_forward_persists_document(config_service, distributor, saved_agent):
    await config_service.add_forward(make_forward())

    stored = await distributor.load(AGENT_ID)
    assert stored.service_names() == ["forward-f1"]


@pytest.mark.asyncio
async def test_add_forward_does_not_notify(config_service, distributor, saved_agent):
    await config_service.add_forward(make_forward())
    assert await distributor.pending_tasks(AGENT_ID) == []


@pytest.mark.asyncio
async def test_unknown_agent_raises_not_found(config_service):
    with pytest.raises(NotFound):
        await config_service.add_forward(make_forward(agent_id="ghost"))


@pytest.mark.asyncio
async def test_remove_forward_without_document_is_noop(config_service, distributor, saved_agent):
    await config_service.remove_forward(make_forward())
    assert await distributor.config_store.load_config("AGENT_GOST_CONFIG", AGENT_ID) is None


@pytest.mark.asyncio
async def test_remove_then_add_leaves_single_entry(config_service, distributor, saved_agent):
    forward = make_forward(forward="relay", listen="relay", channel="tls")
    await config_service.add_forward(forward)
    await config_service.remove_forward(forward)
    await config_service.add_forward(forward)

    stored = await distributor.load(AGENT_ID)
    assert stored.service_names() == ["forward-f1"]
    assert stored.chain_names() == ["chain-f1"]


@pytest.mark.asyncio
async def test_concurrent_adds_keep_every_forward(config_service, distributor, saved_agent):
    await asyncio.gather(
        *(config_service.add_forward(make_forward(f"f{i}")) for i in range(10))
    )

    stored = await distributor.load(AGENT_ID)
    assert sorted(stored.service_names()) == sorted(f"forward-f{i}" for i in range(10))


@pytest.mark.asyncio
async def test_allocate_port_resolves_placeholder_once(
    config_service, distributor, forwards, saved_agent
):
    forward = make_forward(agent_port=0)
    await config_service.create_forward(forward)
    assert (await distributor.load(AGENT_ID)).get_service("forward-f1").addr == "f1-agentPort"

    await config_service.allocate_port("f1", 30003)
    await config_service.allocate_port("f1", 30004)

    stored = await distributor.load(AGENT_ID)
    assert stored.get_service("forward-f1").addr == ":30003"
    assert (await forwards.get_forward_must("f1")).agent_port == 30004


@pytest.mark.asyncio
async def test_delete_forward_cascades(config_service, distributor, forwards, saved_agent):
    await config_service.create_forward(make_forward(forward="relay", channel="tls"))
    await config_service.delete_forward("f1")

    stored = await distributor.load(AGENT_ID)
    assert stored.service_names() == []
    assert stored.chain_names() == []
    assert await forwards.get_forward("f1") is None


@pytest.mark.asyncio
async def test_delete_unknown_forward_raises(config_service, saved_agent):
    with pytest.raises(NotFound):
        await config_service.delete_forward("missing")


@pytest.mark.asyncio
async def test_set_observer_signs_and_distributes(
    config_service, distributor, signatures, saved_agent
):
    await config_service.add_forward(make_forward())
    document = await config_service.set_observer(AGENT_ID)

    sign = signatures.sign(AGENT_SECRET, AGENT_ID)
    observer = document.observers[0]
    assert observer.name == "agent-observer"
    assert observer.plugin.type == "http"
    assert observer.plugin.addr == (
        f"https://panel.example.com/api/v1/agents/observer?sign={sign}"
    )

    tasks = await distributor.pending_tasks(AGENT_ID)
    assert len(tasks) == 1
    task = tasks[0]
    assert task["type"] == "config_change"
    assert task["key"] == "AGENT_GOST_CONFIG"
    value = json.loads(task["value"])
    assert value == document.to_dict()
    assert [s["name"] for s in value["services"]] == ["forward-f1"]


@pytest.mark.asyncio
async def test_set_observer_unknown_agent(config_service, distributor):
    with pytest.raises(NotFound):
        await config_service.set_observer("ghost")
    assert await distributor.pending_tasks("ghost") == []


@pytest.mark.asyncio
async def test_task_queue_keeps_newest_tasks(redis_client, saved_agent):
    distributor = ConfigDistributor(ConfigStore(redis_client), redis_client, task_queue_limit=3)
    documents = [
        compiler.set_observer(ProxyConfigDocument(), f"https://a/cb?sign={i}")
        for i in range(5)
    ]
    for document in documents:
        await distributor.notify_config_changed(AGENT_ID, document)

    tasks = await distributor.pending_tasks(AGENT_ID)
    assert [json.loads(t["value"]) for t in tasks] == [d.to_dict() for d in documents[2:]]
