"""Executors that run shorten operations on behalf of the dispatcher.

The dispatcher never has more calls outstanding than its limit, so a pool
sized to that limit never queues work, and a limit of one needs no pool.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING

from bitcli.config import APP


if TYPE_CHECKING:
    from collections.abc import Callable

    from bitcli.core.ports import ExecutorPort


class SynchronousExecutor:
    """Runs each call on the spot, in the thread that submits it.

    The dispatcher submits from its feeder thread, so URLs are shortened
    strictly one after another without blocking the consumer. Used for runs
    with a single request in flight.
    """

    def submit(
        self,
        fn: Callable[..., object],
        *args: object,
        **kwargs: object,
    ) -> Future[object]:
        """Run fn and return its already settled future."""
        future: Future[object] = Future()
        # Running futures refuse cancel(), as a pool's would mid-call
        future.set_running_or_notify_cancel()
        try:
            result = fn(*args, **kwargs)
        except Exception as e:
            future.set_exception(e)
        else:
            future.set_result(result)
        return future

    def __enter__(self) -> SynchronousExecutor:
        return self

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        return None


class ThreadPoolExecutorAdapter:
    """Worker threads for concurrent shorten operations.

    Single use. Leaving the ``with`` block waits for calls already running;
    when it is left through an exception (a protocol violation, or a
    consumer abandoning the run) calls that have not started are dropped.
    """

    def __init__(self, max_workers: int | None = None) -> None:
        """Create the pool.

        Args:
            max_workers: Number of worker threads, normally the run's
                concurrency limit. None uses the ThreadPoolExecutor default.
        """
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=f"{APP}-worker"
        )

    def submit(
        self,
        fn: Callable[..., object],
        *args: object,
        **kwargs: object,
    ) -> Future[object]:
        """Queue fn on the pool."""
        return self._pool.submit(fn, *args, **kwargs)

    def __enter__(self) -> ThreadPoolExecutorAdapter:
        return self

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        self._pool.shutdown(wait=True, cancel_futures=exc_type is not None)
        return None


def executor_for(max_concurrent: int) -> ExecutorPort:
    """Pick the executor for a run with at most max_concurrent calls in flight."""
    if max_concurrent == 1:
        return SynchronousExecutor()
    return ThreadPoolExecutorAdapter(max_workers=max_concurrent)
