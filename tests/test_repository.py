"""Tests for the forward directory."""

from datetime import datetime, timezone

import pytest

from agentforward.core.errors import NotFound
from tests.conftest import make_forward


@pytest.mark.asyncio
async def test_counter_update_on_missing_forward_raises(forwards, redis_client):
    with pytest.raises(NotFound):
        await forwards.update_counters("gone", 5, 5, datetime.now(timezone.utc))
    assert await redis_client.hgetall("forward:gone") == {}


@pytest.mark.asyncio
async def test_port_update_on_missing_forward_raises(forwards, redis_client):
    with pytest.raises(NotFound):
        await forwards.update_agent_port("gone", 20000, datetime.now(timezone.utc))
    assert await redis_client.hgetall("forward:gone") == {}


@pytest.mark.asyncio
async def test_counter_update_keeps_other_fields(forwards):
    await forwards.save_forward(make_forward(agent_port=10001))
    now = datetime.now(timezone.utc)

    await forwards.update_counters("f1", 30, 20, now)

    stored = await forwards.get_forward_must("f1")
    assert (stored.download, stored.upload, stored.used_traffic) == (30, 20, 50)
    assert stored.agent_port == 10001
    assert stored.updated_at == now


@pytest.mark.asyncio
async def test_partial_record_is_treated_as_missing(forwards, redis_client):
    await redis_client.hset("forward:f1", mapping={"download": 5, "upload": 5})

    assert await forwards.get_forward("f1") is None
    with pytest.raises(NotFound):
        await forwards.get_forward_must("f1")
