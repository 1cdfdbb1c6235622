"""Bounded-concurrency fan-out/fan-in over a lazily consumed input.

A feeder thread pulls items from the input only when one of ``limit`` slots
is free and submits them to an executor. Completed futures report into a
completion queue, from which the calling generator yields results either in
input order (through a reorder buffer keyed by input index) or in completion
order. A slot is released when its result is yielded, so at most ``limit``
items are in flight or buffered at any time, even for unbounded inputs.
"""

from __future__ import annotations

import functools
import logging
import queue
import threading
from typing import TYPE_CHECKING, Any, TypeVar


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator
    from concurrent.futures import Future

    from bitcli.core.ports import ExecutorPort


logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_DONE = "done"
_END = "end"


def dispatch(
    executor: ExecutorPort,
    fn: Callable[[T], R],
    items: Iterable[T],
    *,
    limit: int,
    ordered: bool = True,
) -> Iterator[R]:
    """Apply fn to every item with at most ``limit`` calls in flight.

    Args:
        executor: Executor the calls are submitted to. Must already be entered.
        fn: Function applied to each item.
        items: Input items, consumed lazily (may be unbounded).
        limit: Maximum number of items submitted but not yet yielded.
        ordered: Yield results in input order if True, else in completion order.

    Yields:
        fn(item) for every item.

    Raises:
        ValueError: If limit is less than 1.
        Exception: Whatever fn raised, re-raised when its result is due. An
            error raised by ``items`` itself is re-raised after all items
            submitted before it have been yielded.
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")
    return _dispatch(executor, fn, items, limit, ordered)


def _dispatch(
    executor: ExecutorPort,
    fn: Callable[[T], R],
    items: Iterable[T],
    limit: int,
    ordered: bool,
) -> Iterator[R]:
    events: queue.SimpleQueue[tuple[str, int, Any]] = queue.SimpleQueue()
    slots = threading.Semaphore(limit)
    stop = threading.Event()
    lock = threading.Lock()
    inflight: dict[int, Future[Any]] = {}

    def report(index: int, future: Future[Any]) -> None:
        events.put((_DONE, index, future))

    def feed() -> None:
        count = 0
        error: Exception | None = None
        try:
            for item in items:
                slots.acquire()
                if stop.is_set():
                    break
                future = executor.submit(fn, item)
                with lock:
                    inflight[count] = future
                future.add_done_callback(functools.partial(report, count))
                count += 1
        except Exception as e:
            error = e
        finally:
            events.put((_END, count, error))

    feeder = threading.Thread(target=feed, name="bitcli-dispatch", daemon=True)
    feeder.start()

    completed: dict[int, Future[Any]] = {}
    submitted: int | None = None
    failure: Exception | None = None
    next_index = 0
    yielded = 0

    try:
        while submitted is None or yielded < submitted:
            kind, index, payload = events.get()
            if kind == _END:
                submitted, failure = index, payload
                continue

            with lock:
                inflight.pop(index, None)

            if not ordered:
                yielded += 1
                slots.release()
                yield payload.result()
                continue

            # Reorder buffer: release results strictly in index order
            completed[index] = payload
            while next_index in completed:
                future = completed.pop(next_index)
                next_index += 1
                yielded += 1
                slots.release()
                yield future.result()

        if failure is not None:
            raise failure
    finally:
        stop.set()
        # Wake the feeder if it is blocked waiting for a slot
        slots.release()
        with lock:
            pending = list(inflight.values())
        for future in pending:
            future.cancel()
        if pending:
            logger.debug("cancelled %d pending operations", len(pending))
