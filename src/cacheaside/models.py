"""Canonical Pydantic models shared across all cacheaside modules.

This is the single source of truth for data shapes in the project. The models
fall into two groups:

**Request models** -- describe a single outbound call:
    :class:`RequestOptions`.

**Configuration models** -- loaded from JSON files and environment variables
by :mod:`cacheaside.config`:
    :class:`RetryPolicy`, :class:`CacheStoreConfig`, and :class:`ClientConfig`.

All models use Pydantic v2. :class:`ClientConfig` accepts both the snake_case
field names and the camelCase option names (``retryCount``, ``cacheTTL``,
``redisConfig``) so that existing option dictionaries can be loaded as-is.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Literal, Optional
from urllib.parse import quote

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from cacheaside.exceptions import ConfigurationError


# --- Retry ---


class RetryPolicy(BaseModel):
    """Fixed-attempt, fixed-delay retry policy.

    Immutable once created. ``mode`` selects which failures are retried:
    ``"all"`` retries every exception until the attempt budget is spent,
    ``"transient"`` stops at the first failure that
    :func:`~cacheaside.retry.is_transient` rejects (e.g. an HTTP 404).
    """

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1, description="Total attempts, including the first")
    delay: float = Field(default=1.0, ge=0, description="Seconds to wait between attempts")
    mode: Literal["all", "transient"] = Field(
        default="all", description="Which failures are retried"
    )


# --- Request options ---


class RequestOptions(BaseModel):
    """Per-request options forwarded to the transport and folded into cache keys.

    Unknown keys are preserved (``extra="allow"``) and take part in the cache
    key like the named fields do. Of those, only ``cookies`` and ``auth`` are
    forwarded by :class:`~cacheaside.client.transport.HttpxTransport`; any
    other extra affects the cache key alone.

    Header values are sent as strings, so ``{"X-Page": 1}`` becomes
    ``{"X-Page": "1"}``. ``None`` values are dropped.
    """

    model_config = ConfigDict(extra="allow")

    headers: dict[str, str] = Field(default_factory=dict)
    params: dict[str, Any] = Field(default_factory=dict)
    timeout: Optional[float] = Field(default=None, description="Per-request timeout in seconds")
    follow_redirects: Optional[bool] = None

    @field_validator("headers", mode="before")
    @classmethod
    def stringify_headers(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {str(name): str(item) for name, item in value.items() if item is not None}

    @classmethod
    def coerce(cls, options: RequestOptions | dict[str, Any] | None) -> RequestOptions:
        """Return *options* as a :class:`RequestOptions`, validating plain dicts.

        Raises:
            ConfigurationError: If *options* has the wrong shape.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        try:
            return cls.model_validate(options)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid request options: {exc}") from exc

    def canonical(self) -> str:
        """Stable string form: sorted keys, no defaults, no ``None`` values."""
        from cacheaside.keys import canonical_json

        return canonical_json(self.model_dump(exclude_defaults=True, exclude_none=True))


# --- Cache store ---


class CacheBackend(str, enum.Enum):
    """Supported cache-store backends."""

    REDIS = "redis"
    DISK = "disk"
    MEMORY = "memory"


class CacheStoreConfig(BaseModel):
    """Connection settings for the cache store.

    For Redis either give a full ``url`` or the individual ``host`` /
    ``port`` / ``db`` / ``password`` parts; the parts win when ``host`` is
    set. ``directory`` is only used by the disk backend and defaults to the
    XDG cache directory.
    """

    model_config = ConfigDict(populate_by_name=True)

    backend: CacheBackend = Field(default=CacheBackend.REDIS)
    url: str = Field(default="redis://localhost:6379/0", description="Redis connection URL")
    host: Optional[str] = None
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    directory: Optional[Path] = Field(default=None, description="Disk cache directory")
    key_prefix: str = Field(
        default="",
        validation_alias=AliasChoices("key_prefix", "keyPrefix"),
        description="Prefix prepended to every key in the store",
    )

    def redis_url(self) -> str:
        """Return the effective Redis URL."""
        if not self.host:
            return self.url
        auth = f":{quote(self.password, safe='')}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


# --- Client ---


class ClientConfig(BaseModel):
    """Top-level configuration for :class:`~cacheaside.client.CachingClient`."""

    model_config = ConfigDict(populate_by_name=True)

    base_url: str = Field(
        default="",
        validation_alias=AliasChoices("base_url", "baseURL"),
    )
    retry_count: int = Field(
        default=3,
        ge=1,
        validation_alias=AliasChoices("retry_count", "retryCount"),
        description="Max attempts per request",
    )
    retry_delay: float = Field(
        default=1.0,
        ge=0,
        validation_alias=AliasChoices("retry_delay", "retryDelay"),
        description="Seconds between attempts",
    )
    retry_mode: Literal["all", "transient"] = Field(
        default="all",
        validation_alias=AliasChoices("retry_mode", "retryMode"),
    )
    cache_ttl: int = Field(
        default=300,
        ge=1,
        validation_alias=AliasChoices("cache_ttl", "cacheTTL"),
        description="Cache TTL in seconds",
    )
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    strict_cache_writes: bool = Field(
        default=False,
        description="Fail the request when writing its response to the cache fails",
    )
    cache_store: CacheStoreConfig = Field(
        default_factory=CacheStoreConfig,
        validation_alias=AliasChoices("cache_store", "cacheStoreConfig", "redisConfig"),
    )

    def retry_policy(self) -> RetryPolicy:
        """Build the :class:`RetryPolicy` described by this config."""
        return RetryPolicy(
            max_attempts=self.retry_count,
            delay=self.retry_delay,
            mode=self.retry_mode,
        )
