"""HTTP response cache settings."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ._sanitizers import sanitize_inline_numeric
from .yaml_sources import create_http_cache_yaml_source


class HttpCacheSettings(BaseSettings):
    """Whole-response caching for GET requests.

    Environment variables use HTTP_CACHE_ prefix.
    Example: HTTP_CACHE_ENABLED=true, HTTP_CACHE_EXCLUDE_PATHS='["/metrics"]'
    """

    enabled: bool = Field(default=True, description="Cache successful GET responses")

    ttl: int | None = Field(
        default=None,
        ge=0,
        description="TTL in seconds for cached responses (unset = store default, 0 = no expiry)",
    )

    route_ttls: dict[str, int] = Field(
        default_factory=lambda: {"/company": 0},
        description=(
            "Per-route TTL overrides keyed by path prefix (JSON object); "
            "the longest matching prefix wins"
        ),
    )

    exclude_paths: list[str] = Field(
        default_factory=lambda: [
            "/metrics",
            "/docs",
            "/openapi.json",
            "/health/live",
            "/health/ready",
        ],
        description="Exact request paths that are never cached (JSON array)",
    )

    cached_headers: list[str] = Field(
        default_factory=lambda: ["content-type", "content-language", "cache-control"],
        description="Response headers stored alongside the cached body (JSON array)",
    )

    @field_validator("cached_headers", mode="after")
    @classmethod
    def _lowercase_headers(cls, value: list[str]) -> list[str]:
        return [header.lower() for header in value]

    @field_validator("ttl", mode="before")
    @classmethod
    def _normalize_ttl(cls, value: Any) -> Any:
        return sanitize_inline_numeric(value)

    @field_validator("route_ttls", mode="after")
    @classmethod
    def _check_route_ttls(cls, value: dict[str, int]) -> dict[str, int]:
        normalized = {}
        for prefix, ttl in value.items():
            if ttl < 0:
                msg = f"Route TTL for {prefix!r} must be >= 0 seconds, got {ttl}"
                raise ValueError(msg)
            normalized[prefix.rstrip("/") or "/"] = ttl
        return normalized

    def ttl_for(self, path: str) -> int | None:
        """TTL for responses of ``path``: the longest matching route prefix, else ``ttl``."""
        best: str | None = None
        for prefix in self.route_ttls:
            matches = prefix == "/" or path == prefix or path.startswith(f"{prefix}/")
            if matches and (best is None or len(prefix) > len(best)):
                best = prefix
        return self.ttl if best is None else self.route_ttls[best]

    model_config = SettingsConfigDict(
        env_prefix="HTTP_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
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
            create_http_cache_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
