"""bitcli - Shorten URLs via Bitly with a local cache of bitlinks.

This library provides a simple Python API for shortening many URLs with
bounded concurrency, while a local SQLite cache avoids asking the service
twice for the same link.

Example:
    >>> from bitcli import BitlinkCache, BitlyClient, Shortener
    >>> shortener = Shortener(
    ...     BitlyClient(api_token="..."),
    ...     BitlinkCache.open("bitlinks"),
    ... )
    >>> for outcome in shortener.shorten_all(["https://example.com"]):
    ...     print(outcome.bitlink)
"""

from bitcli.adapters.cache import BitlinkCache
from bitcli.adapters.executor import SynchronousExecutor, ThreadPoolExecutorAdapter
from bitcli.adapters.remote import BitlyClient
from bitcli.config import Config, Options, load_config
from bitcli.core.exceptions import (
    BitcliError,
    ConfigurationError,
    InvalidUrlError,
    OfflineError,
    ProtocolViolationError,
    RemoteRejectedError,
    TransportError,
    UnresolvedGroupError,
)
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
from bitcli.core.services import Shortener


__version__ = "0.1.0"

__all__ = [
    "BitcliError",
    "Bitlink",
    "BitlinkCache",
    "BitlyClient",
    "CachePort",
    "Config",
    "ConfigurationError",
    "ErrorEnvelope",
    "ExecutorPort",
    "FieldError",
    "InvalidUrlError",
    "OfflineError",
    "Options",
    "Ordering",
    "ProtocolViolationError",
    "RemotePort",
    "RemoteRejectedError",
    "ShortenOutcome",
    "ShortenRequest",
    "Shortener",
    "SynchronousExecutor",
    "ThreadPoolExecutorAdapter",
    "TransportError",
    "UnresolvedGroupError",
    "UserInfo",
    "__version__",
    "load_config",
]
