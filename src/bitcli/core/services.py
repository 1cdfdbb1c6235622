"""Core domain services for bitcli."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bitcli.config import DEFAULT_MAX_CONCURRENT
from bitcli.core.dispatch import dispatch
from bitcli.core.exceptions import BitcliError
from bitcli.core.models import Ordering, ShortenOutcome
from bitcli.core.operations import shorten_one


if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from bitcli.config import Config
    from bitcli.core.models import Bitlink
    from bitcli.core.ports import CachePort, ExecutorPort, RemotePort


logger = logging.getLogger(__name__)


class Shortener:
    """Orchestrates URL shortening with caching and bounded concurrency."""

    def __init__(
        self,
        remote: RemotePort,
        cache: CachePort | None = None,
        *,
        domain: str | None = None,
        group_id: str | None = None,
        executor: ExecutorPort | None = None,
    ) -> None:
        self._remote = remote
        self._cache = cache
        self._domain = domain
        self._group_id = group_id
        self._executor = executor

    @classmethod
    def from_config(cls, config: Config) -> Shortener:
        """Create a Shortener with the default adapters for a configuration.

        Args:
            config: Fully resolved configuration.

        Returns:
            Shortener backed by a BitlyClient and, unless caching is
            disabled or unavailable, a BitlinkCache.
        """
        from bitcli.adapters.cache import BitlinkCache
        from bitcli.adapters.remote import BitlyClient

        remote = BitlyClient(
            api_url=str(config.api_url),
            api_token=config.api_token.get_secret_value(),
            offline=config.offline,
            timeout=config.timeout,
        )
        cache = BitlinkCache.open(BitlinkCache.DEFAULT_NAME, config.cache_dir)
        if cache is None:
            logger.info("running without a local cache")

        return cls(
            remote,
            cache,
            domain=config.domain,
            group_id=config.default_group_guid,
        )

    @property
    def remote(self) -> RemotePort:
        """The remote client used for shorten requests."""
        return self._remote

    @property
    def cache(self) -> CachePort | None:
        """The local cache, or None when caching is disabled."""
        return self._cache

    def close(self) -> None:
        """Release the remote client and the cache, if they hold resources."""
        for resource in (self._remote, self._cache):
            close = getattr(resource, "close", None)
            if callable(close):
                close()

    def shorten(self, long_url: str) -> Bitlink:
        """Shorten a single URL, consulting the cache first.

        Args:
            long_url: The URL to shorten.

        Returns:
            The bitlink, from the cache or freshly created.

        Raises:
            BitcliError: Any recoverable failure of the operation.
            ProtocolViolationError: If the service breaks its contract.
        """
        return shorten_one(
            long_url,
            self._remote,
            self._cache,
            domain=self._domain,
            group_id=self._group_id,
        )

    def shorten_all(
        self,
        urls: Iterable[str],
        *,
        ordering: Ordering = Ordering.ORDERED,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
    ) -> Iterator[ShortenOutcome]:
        """Shorten a stream of URLs with at most max_concurrent in flight.

        Input is consumed lazily, so urls may be an unbounded stream such as
        lines of standard input. An injected executor is entered for the
        duration of the run; without one, a thread pool sized to
        max_concurrent is created per call (no pool when it is 1).

        Args:
            urls: Input URLs.
            ordering: Emit outcomes in input order or in completion order.
            max_concurrent: Maximum number of shorten operations in flight.

        Returns:
            Iterator of one ShortenOutcome per input URL. Recoverable errors
            are reported as failed outcomes and never stop other items.

        Raises:
            ValueError: If max_concurrent is less than 1.
            ProtocolViolationError: While iterating, if the service breaks its
                contract; remaining work is abandoned.
        """
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")

        return self._run(urls, Ordering(ordering), max_concurrent)

    def _run(
        self, urls: Iterable[str], ordering: Ordering, max_concurrent: int
    ) -> Iterator[ShortenOutcome]:
        if self._executor is not None:
            executor = self._executor
        else:
            from bitcli.adapters.executor import executor_for

            executor = executor_for(max_concurrent)

        with executor:
            yield from dispatch(
                executor,
                self._attempt,
                urls,
                limit=max_concurrent,
                ordered=ordering is Ordering.ORDERED,
            )

    def _attempt(self, long_url: str) -> ShortenOutcome:
        try:
            bitlink = self.shorten(long_url)
        except BitcliError as e:
            logger.debug("failed to shorten %s: %s", long_url, e)
            return ShortenOutcome(long_url, error=e)
        return ShortenOutcome(long_url, bitlink=bitlink)
