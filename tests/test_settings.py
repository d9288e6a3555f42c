"""Tests for settings loading."""

from agentforward.config import AppSettings, ProxySettings, Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("GOST_CONFIG_KEY", raising=False)
    proxy = ProxySettings()
    assert proxy.config_key == "AGENT_GOST_CONFIG"
    assert proxy.observer_name == "agent-observer"
    assert proxy.cycle_traffic_bucket == "forward_gost_cycle_traffic"


def test_server_url_trailing_slash_stripped(monkeypatch):
    monkeypatch.setenv("SERVER_URL", "https://panel.example.com/")
    assert AppSettings().server_url == "https://panel.example.com"


def test_sections_can_be_injected():
    settings = Settings(app=AppSettings(SERVER_URL="https://x.example"))
    assert settings.app.server_url == "https://x.example"
    assert settings.proxy.config_key == "AGENT_GOST_CONFIG"


def test_task_queue_limit(monkeypatch):
    monkeypatch.delenv("AGENT_TASK_QUEUE_LIMIT", raising=False)
    assert ProxySettings().task_queue_limit == 100
    monkeypatch.setenv("AGENT_TASK_QUEUE_LIMIT", "7")
    assert ProxySettings().task_queue_limit == 7
