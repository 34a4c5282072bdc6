"""Configuration management for minirel.

Values come from the environment with the ``MINIREL_`` prefix and ``__``
as the nested delimiter, e.g. ``MINIREL_SERVER__PORT=8080`` or
``MINIREL_ENGINE__NULL_EQUALS_NULL=true``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineConfig(BaseModel):
    """Table engine configuration."""

    null_equals_null: bool = Field(
        default=False, description="Whether a Null = Null predicate evaluates to true"
    )


class ServerConfig(BaseModel):
    """REST server configuration."""

    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, ge=1, le=65535, description="Server port")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    metrics_enabled: bool = Field(
        default=True, description="Expose Prometheus metrics at /metrics"
    )
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="minirel", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for minirel."""

    model_config = SettingsConfigDict(
        env_prefix="MINIREL_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    engine: EngineConfig = Field(default_factory=EngineConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
