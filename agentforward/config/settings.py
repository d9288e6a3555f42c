"""
AgentForward Settings
Pydantic-based configuration with support for env vars and config files.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application-level settings."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
    )

    name: str = Field(default="AgentForward", alias="APP_NAME")
    env: str = Field(default="development", alias="APP_ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # API settings
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")
    api_workers: int = Field(default=1, alias="API_WORKERS")

    # Public base URL the proxy engine uses to reach the observer callback
    server_url: str = Field(default="http://localhost:8000", alias="SERVER_URL")

    @field_validator("server_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v):
        if isinstance(v, str):
            return v.rstrip("/")
        return v


class RedisSettings(BaseSettings):
    """Redis settings."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
    )

    host: str = Field(default="localhost", alias="REDIS_HOST")
    port: int = Field(default=6379, alias="REDIS_PORT")
    password: Optional[str] = Field(default=None, alias="REDIS_PASSWORD")
    db: int = Field(default=0, alias="REDIS_DB")
    max_connections: int = Field(default=20, alias="REDIS_MAX_CONNECTIONS")


class ProxySettings(BaseSettings):
    """Proxy engine document and telemetry settings."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
    )

    config_key: str = Field(default="AGENT_GOST_CONFIG", alias="GOST_CONFIG_KEY")
    observer_name: str = Field(default="agent-observer", alias="OBSERVER_NAME")
    observer_path: str = Field(
        default="/api/v1/agents/observer",
        alias="OBSERVER_PATH",
    )
    cycle_traffic_bucket: str = Field(
        default="forward_gost_cycle_traffic",
        alias="CYCLE_TRAFFIC_BUCKET",
    )
    task_queue_limit: int = Field(default=100, ge=1, alias="AGENT_TASK_QUEUE_LIMIT")


class Settings(BaseSettings):
    """
    Main settings class that aggregates all config sections.

    Usage:
        from agentforward.config import get_settings

        settings = get_settings()
        print(settings.app.server_url)
        print(settings.proxy.config_key)
    """

    model_config = SettingsConfigDict(
        env_file=".env.local",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=AppSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    proxy: ProxySettings = Field(default_factory=ProxySettings)

    def __init__(self, **data):
        super().__init__(**data)
        # Initialize sub-settings with same env source
        self.app = data.get("app") or AppSettings()
        self.redis = data.get("redis") or RedisSettings()
        self.proxy = data.get("proxy") or ProxySettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: The application settings
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Reload settings (clears cache).

    Returns:
        Settings: Fresh settings instance
    """
    get_settings.cache_clear()
    return get_settings()
