"""Redis cache configuration settings."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, urlparse

from pydantic import Field, SecretStr, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ._sanitizers import sanitize_inline_numeric
from .yaml_sources import create_redis_yaml_source


class RedisSettings(BaseSettings):
    """Redis connection and cache behaviour settings.

    Environment variables use REDIS_ prefix.
    Example: REDIS_URL="redis://localhost:6379/0", REDIS_DEFAULT_TTL=60

    Either provide REDIS_URL (components are parsed from it) or the
    individual components (the URL is built from them). A blank REDIS_URL
    is treated as unset.
    """

    # ──────────────────────────────────────────────────────────────
    # Connection configuration
    # ──────────────────────────────────────────────────────────────

    redis_url: str | None = Field(
        default=None,
        alias="REDIS_URL",
        description="Redis connection URL (redis://[username:password@]host:port/db). Overrides components.",
    )

    host: str = Field(default="localhost", description="Redis server hostname or IP address")

    port: int = Field(default=6379, ge=1, le=65535, description="Redis server port")

    db: int = Field(default=0, ge=0, le=15, description="Redis database number (0-15)")

    username: str | None = Field(default=None, description="Redis username (Redis 6+ ACL)")

    password: SecretStr | None = Field(default=None, description="Redis password")

    ssl_enabled: bool = Field(default=False, description="Use rediss:// for the connection")

    # ──────────────────────────────────────────────────────────────
    # Connection pool settings
    # ──────────────────────────────────────────────────────────────

    max_connections: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Maximum Redis connection pool size",
    )

    socket_timeout: float = Field(
        default=5.0,
        ge=0.1,
        le=30.0,
        description="Socket timeout in seconds for individual commands",
    )

    socket_connect_timeout: float = Field(
        default=5.0,
        ge=0.1,
        le=30.0,
        description="Socket timeout in seconds for the initial connection",
    )

    health_check_interval: int = Field(
        default=30,
        ge=0,
        le=300,
        description="Idle connection health check interval in seconds (0 to disable)",
    )

    # ──────────────────────────────────────────────────────────────
    # Cache behaviour
    # ──────────────────────────────────────────────────────────────

    default_ttl: int = Field(
        default=60,
        ge=0,
        description="TTL in seconds applied when a caller passes none (0 = no expiry)",
    )

    key_prefix: str = Field(
        default="jobboard:",
        min_length=1,
        max_length=100,
        pattern=r"^[a-zA-Z0-9_-]+:?$",
        description="Namespace prepended to every physical cache key",
    )

    tag_index_ttl: int = Field(
        default=0,
        ge=0,
        description=(
            "Expiry in seconds refreshed on a tag membership set at every track "
            "(0 = sets never expire). Must not be shorter than the TTL of tracked entries."
        ),
    )

    tag_index_warn_size: int = Field(
        default=0,
        ge=0,
        description="Log a warning when a tag membership set grows past this size (0 = off)",
    )

    # ──────────────────────────────────────────────────────────────
    # Retry and startup
    # ──────────────────────────────────────────────────────────────

    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per cache operation on connection/timeout errors",
    )

    retry_delay: float = Field(
        default=0.1,
        ge=0.0,
        le=5.0,
        description="Initial retry delay in seconds (exponential backoff)",
    )

    startup_require_cache: bool = Field(
        default=False,
        description="Fail application startup if Redis is unavailable (False = degraded mode)",
    )

    # ──────────────────────────────────────────────────────────────
    # Validators and computed fields
    # ──────────────────────────────────────────────────────────────

    @field_validator("redis_url", mode="before")
    @classmethod
    def _blank_url_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator(
        "default_ttl", "tag_index_ttl", "tag_index_warn_size", "max_retries", mode="before"
    )
    @classmethod
    def _normalize_numeric(cls, value: Any) -> Any:
        """Allow numeric env vars with inline comments (e.g., "60  # one minute")."""
        return sanitize_inline_numeric(value)

    @model_validator(mode="after")
    def _apply_url(self) -> RedisSettings:
        """Populate component fields from redis_url when one is given."""
        if self.redis_url:
            parsed = urlparse(self.redis_url)
            if parsed.hostname:
                object.__setattr__(self, "host", parsed.hostname)
            if parsed.port:
                object.__setattr__(self, "port", parsed.port)
            if parsed.path and len(parsed.path) > 1:
                try:
                    object.__setattr__(self, "db", int(parsed.path.lstrip("/")))
                except ValueError:
                    pass
            if parsed.username:
                object.__setattr__(self, "username", parsed.username)
            if parsed.password:
                object.__setattr__(self, "password", SecretStr(parsed.password))
            if parsed.scheme == "rediss":
                object.__setattr__(self, "ssl_enabled", True)
        return self

    @computed_field
    @property
    def url(self) -> str:
        """Redis URL built from the component fields."""
        scheme = "rediss" if self.ssl_enabled else "redis"
        auth = ""
        if self.password:
            secret = quote(self.password.get_secret_value())
            user = quote(self.username) if self.username else ""
            auth = f"{user}:{secret}@"
        return f"{scheme}://{auth}{self.host}:{self.port}/{self.db}"

    def connection_pool_kwargs(self) -> dict[str, Any]:
        """Return kwargs for redis.asyncio.ConnectionPool.from_url()."""
        kwargs: dict[str, Any] = {
            "max_connections": self.max_connections,
            "socket_timeout": self.socket_timeout,
            "socket_connect_timeout": self.socket_connect_timeout,
            "decode_responses": True,
            "encoding": "utf-8",
        }
        if self.health_check_interval > 0:
            kwargs["health_check_interval"] = self.health_check_interval
        return kwargs

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings source precedence: init > yaml > env > dotenv > secrets."""
        return (
            init_settings,
            create_redis_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
