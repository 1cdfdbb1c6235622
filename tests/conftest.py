"""Pytest configuration and shared fixtures.

This module registers custom markers for CI job separation and provides
shared fixtures for the test suite.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest

from bitcli.core.models import Bitlink, ShortenRequest, UserInfo


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "core: Core models, ports, and services")
    config.addinivalue_line("markers", "remote: Bitly HTTP client adapter")
    config.addinivalue_line("markers", "cache: SQLite cache adapter")
    config.addinivalue_line("markers", "cli: CLI tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
    config.addinivalue_line(
        "markers", "tra: Test Responsibility Anchor (TRA) - namespace.Anchor format"
    )
    config.addinivalue_line(
        "markers",
        "tier: Test tier for CI job separation (0=instant, 1=fast, 2=standard, 3=slow, 4=manual)",
    )


class FakeRemote:
    """In-memory RemotePort that records calls and tracks concurrency.

    Bitlink ids are assigned in call order ("1", "2", ...) unless a URL has
    an explicit response. Values in ``errors`` are raised instead.
    """

    def __init__(
        self,
        user: UserInfo | None = None,
        *,
        delays: dict[str, float] | None = None,
        errors: dict[str, Exception] | None = None,
        responses: dict[str, Bitlink] | None = None,
    ) -> None:
        self.user = user or UserInfo(is_active=True, default_group_id="Bdefault")
        self.delays = delays or {}
        self.errors = errors or {}
        self.responses = responses or {}
        self.user_calls = 0
        self.requests: list[ShortenRequest] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def fetch_user(self) -> UserInfo:
        with self._lock:
            self.user_calls += 1
        return self.user

    def create_shortlink(self, request: ShortenRequest) -> Bitlink:
        with self._lock:
            self.requests.append(request)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            call_id = str(len(self.requests))
        try:
            time.sleep(self.delays.get(request.long_url, 0.0))
            if request.long_url in self.errors:
                raise self.errors[request.long_url]
            if request.long_url in self.responses:
                return self.responses[request.long_url]
            return Bitlink(
                short_url=f"https://test.domain/{call_id}",
                id=f"test.domain/{call_id}",
                long_url=request.long_url,
            )
        finally:
            with self._lock:
                self.in_flight -= 1


class RecordingCache:
    """In-memory CachePort that records lookups and writes."""

    def __init__(self, entries: dict[ShortenRequest, Bitlink] | None = None) -> None:
        self.entries = dict(entries or {})
        self.gets: list[ShortenRequest] = []
        self.sets: list[tuple[ShortenRequest, Bitlink]] = []

    def get(self, request: ShortenRequest) -> Bitlink | None:
        self.gets.append(request)
        return self.entries.get(request)

    def set(self, request: ShortenRequest, bitlink: Bitlink) -> bool:
        self.sets.append((request, bitlink))
        if request in self.entries:
            return False
        self.entries[request] = bitlink
        return True


@pytest.fixture
def make_remote() -> type[FakeRemote]:
    """The FakeRemote class, for tests that need delays or canned errors."""
    return FakeRemote


@pytest.fixture
def fake_remote() -> FakeRemote:
    """Fake remote service whose user is active with group "Bdefault"."""
    return FakeRemote()


@pytest.fixture
def inactive_remote() -> FakeRemote:
    """Fake remote service whose user is inactive."""
    return FakeRemote(UserInfo(is_active=False, default_group_id="Bdefault"))


@pytest.fixture
def make_cache() -> type[RecordingCache]:
    """The RecordingCache class, for tests that need pre-seeded entries."""
    return RecordingCache


@pytest.fixture
def recording_cache() -> RecordingCache:
    """Empty in-memory cache that records calls."""
    return RecordingCache()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Directory for SQLite cache files."""
    return tmp_path / "cache"


Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def make_client() -> Iterator[Callable[..., Any]]:
    """Factory for BitlyClient instances backed by an httpx.MockTransport."""
    from bitcli.adapters.remote import BitlyClient

    clients: list[BitlyClient] = []

    def factory(handler: Handler, **kwargs: Any) -> BitlyClient:
        kwargs.setdefault("api_token", "secret-token")
        kwargs.setdefault("api_url", "https://api.test")
        client = BitlyClient(transport=httpx.MockTransport(handler), **kwargs)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()
