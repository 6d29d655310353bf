"""Shared test fixtures for cacheaside.

Provides a scripted fake transport, an in-memory store with a controllable
clock, a retry executor that records its sleeps instead of waiting, and an
isolated config environment. These fixtures are automatically discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from cacheaside.cache import MemoryCacheStore
from cacheaside.client import CachingClient, TransportResponse
from cacheaside.models import RequestOptions
from cacheaside.output import reset_output
from cacheaside.retry import RetryExecutor


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager binds sys.stdout/sys.stderr at creation time; Typer's
    CliRunner swaps those streams, so a cached manager would write to closed
    files in later tests.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------


class FakeTransport:
    """Transport that replays scripted outcomes and records every call.

    Each outcome is either a :class:`TransportResponse` (returned) or an
    exception instance (raised). The last outcome repeats once the script
    runs out.
    """

    def __init__(self, *outcomes: Any) -> None:
        self._outcomes = list(outcomes) or [TransportResponse(status_code=200, body=None)]
        self.calls: list[tuple[str, str, RequestOptions, Any]] = []
        self.closed = False

    async def request(
        self,
        method: str,
        url: str,
        options: RequestOptions,
        data: Any = None,
    ) -> TransportResponse:
        self.calls.append((method, url, options, data))
        index = min(len(self.calls), len(self._outcomes)) - 1
        outcome = self._outcomes[index]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        self.closed = True


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def make_transport() -> Callable[..., FakeTransport]:
    """Factory for :class:`FakeTransport` instances."""
    return FakeTransport


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store(clock: FakeClock) -> MemoryCacheStore:
    """An empty in-memory store driven by the fake clock."""
    return MemoryCacheStore(clock=clock)


@pytest.fixture
def sleeps() -> list[float]:
    """Delays requested by the no-wait retry executor."""
    return []


@pytest.fixture
def fast_retry(sleeps: list[float]) -> RetryExecutor:
    """Three attempts, 1 second apart, recording sleeps instead of waiting."""

    async def _sleep(delay: float) -> None:
        sleeps.append(delay)

    return RetryExecutor(max_attempts=3, delay=1.0, sleep=_sleep)


@pytest.fixture
def make_client(
    memory_store: MemoryCacheStore,
    fast_retry: RetryExecutor,
) -> Callable[..., CachingClient]:
    """Build a :class:`CachingClient` around a transport, sharing the memory store."""

    def _make(transport: FakeTransport, **kwargs: Any) -> CachingClient:
        kwargs.setdefault("store", memory_store)
        kwargs.setdefault("retry", fast_retry)
        return CachingClient(transport=transport, **kwargs)

    return _make


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at subdirectories of tmp_path, clears all
    CACHEASIDE_* environment variables and changes the working directory to
    tmp_path so no real user or project config leaks in.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("cacheaside.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))

    for var in [
        "CACHEASIDE_BASE_URL",
        "CACHEASIDE_RETRY_COUNT",
        "CACHEASIDE_CACHE_TTL",
        "CACHEASIDE_CACHE_BACKEND",
        "CACHEASIDE_REDIS_URL",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path
