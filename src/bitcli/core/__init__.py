"""Core domain module for bitcli.

This module contains pure Python domain models and port definitions.
It has no I/O dependencies and can be tested in isolation.
"""

from bitcli.core.models import (
    Bitlink,
    ErrorEnvelope,
    FieldError,
    Ordering,
    ShortenOutcome,
    ShortenRequest,
    UserInfo,
)
from bitcli.core.ports import CachePort, ExecutorPort, RemotePort


__all__ = [
    "Bitlink",
    "CachePort",
    "ErrorEnvelope",
    "ExecutorPort",
    "FieldError",
    "Ordering",
    "RemotePort",
    "ShortenOutcome",
    "ShortenRequest",
    "UserInfo",
]
