"""
AgentForward Configuration Module
Centralized configuration management using pydantic-settings.
"""

from agentforward.config.settings import (
    Settings,
    AppSettings,
    RedisSettings,
    ProxySettings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "AppSettings",
    "RedisSettings",
    "ProxySettings",
    "get_settings",
    "reload_settings",
]
