"""Executor adapters for parallel execution."""

from bitcli.adapters.executor.executor import (
    SynchronousExecutor,
    ThreadPoolExecutorAdapter,
    executor_for,
)


__all__ = ["SynchronousExecutor", "ThreadPoolExecutorAdapter", "executor_for"]
