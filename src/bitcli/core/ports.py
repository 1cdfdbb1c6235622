"""Port interfaces for hexagonal architecture.

Ports define contracts that adapters must implement. The core domain
depends only on these protocols, never on concrete implementations.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from concurrent.futures import Future

    from bitcli.core.models import Bitlink, ShortenRequest, UserInfo


@runtime_checkable
class RemotePort(Protocol):
    """Remote link-shortening service (Bitly API)."""

    def fetch_user(self) -> UserInfo:
        """Fetch the authenticated user's info.

        Raises:
            OfflineError: If the client runs without network access.
            TransportError: If the request fails at the network level.
            RemoteRejectedError: If the service returns an error response.
            ProtocolViolationError: On an unexpected status or body.
        """
        ...

    def create_shortlink(self, request: ShortenRequest) -> Bitlink:
        """Create (or retrieve) the bitlink for a request.

        Raises:
            OfflineError: If the client runs without network access.
            TransportError: If the request fails at the network level.
            RemoteRejectedError: If the service returns an error response.
            ProtocolViolationError: On an unexpected status or body.
        """
        ...


@runtime_checkable
class CachePort(Protocol):
    """Local cache of bitlinks keyed by (group, domain, long URL).

    Implementations never raise: storage failures are reported as a miss
    (get) or as a non-insert (set).
    """

    def get(self, request: ShortenRequest) -> Bitlink | None:
        """Get the cached bitlink for a request, or None if not cached."""
        ...

    def set(self, request: ShortenRequest, bitlink: Bitlink) -> bool:
        """Store a bitlink for a request.

        Returns:
            True if a new entry was inserted, False if one already existed
            for the same key (or the write failed).
        """
        ...


@runtime_checkable
class ExecutorPort(Protocol):
    """Executor for parallel task execution.

    Abstracts over concurrent.futures executors to allow dependency injection
    and testing. The core domain uses this protocol instead of directly
    importing ThreadPoolExecutor, maintaining "concurrency at the edges".
    """

    def submit(
        self, fn: Callable[..., object], *args: object, **kwargs: object
    ) -> Future[object]:  # type: ignore[name-defined, unused-ignore]
        """Submit a function for execution.

        Args:
            fn: Function to execute.
            *args: Positional arguments to pass to fn.
            **kwargs: Keyword arguments to pass to fn.

        Returns:
            Future representing the pending result.
        """
        ...

    def __enter__(self) -> ExecutorPort:
        """Enter context manager."""
        ...

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        """Exit context manager."""
        ...
