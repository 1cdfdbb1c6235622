"""Core domain models for bitcli.

These models are pure Python dataclasses with no I/O dependencies.
They represent the requests, results and failures of the shortening pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from bitcli.core.exceptions import InvalidUrlError


if TYPE_CHECKING:
    from bitcli.core.exceptions import BitcliError


_SCHEMES = frozenset({"http", "https"})


class Ordering(str, Enum):
    """Order in which pipeline results are emitted."""

    ORDERED = "ordered"
    UNORDERED = "unordered"


def parse_url(value: str) -> str:
    """Validate an input URL and return it trimmed.

    Args:
        value: Raw input, e.g. a command-line argument or a line of stdin.

    Returns:
        The trimmed URL.

    Raises:
        InvalidUrlError: If the value is not an absolute http(s) URL with a host.
    """
    url = value.strip()
    if not url or any(ch.isspace() for ch in url):
        raise InvalidUrlError(value)

    try:
        parts = urlsplit(url)
    except ValueError:
        raise InvalidUrlError(value) from None

    if parts.scheme.lower() not in _SCHEMES or not parts.hostname:
        raise InvalidUrlError(value)

    return url


@dataclass(frozen=True, slots=True)
class ShortenRequest:
    """A single logical shorten request, also the cache lookup key.

    Attributes:
        long_url: The URL to shorten.
        group_id: GUID of the group the bitlink is created under.
        domain: Branded short domain, or None for the service default.

    Example:
        >>> req = ShortenRequest(long_url="https://example.com", group_id="Ba1")
        >>> req.domain is None
        True
    """

    long_url: str
    group_id: str
    domain: str | None = None

    def __post_init__(self) -> None:
        """Validate request fields after initialization."""
        if not self.long_url:
            raise ValueError("ShortenRequest long_url cannot be empty")
        if not self.group_id:
            raise ValueError("ShortenRequest group_id cannot be empty")


@dataclass(frozen=True, slots=True)
class Bitlink:
    """A shortened link as returned by the service or the cache.

    Attributes:
        short_url: The short link (e.g. "https://bit.ly/3WA1XXp").
        id: Service-wide unique identifier of the bitlink.
        long_url: The original URL the bitlink redirects to.
    """

    short_url: str
    id: str
    long_url: str

    def __str__(self) -> str:
        return self.short_url


@dataclass(frozen=True, slots=True)
class UserInfo:
    """The authenticated user, as far as group resolution is concerned."""

    is_active: bool
    default_group_id: str


@dataclass(frozen=True, slots=True)
class FieldError:
    """Per-field detail attached to an error response."""

    field: str
    error_code: str
    message: str = ""


@dataclass(frozen=True, slots=True)
class ErrorEnvelope:
    """Structured failure payload returned by the service.

    Attributes:
        message: Short machine-ish message, e.g. "FORBIDDEN".
        description: Optional human-readable explanation.
        resource: Optional name of the resource the error refers to.
        field_errors: Optional per-field details.
    """

    message: str
    description: str | None = None
    resource: str | None = None
    field_errors: tuple[FieldError, ...] = ()

    def __str__(self) -> str:
        text = f"{self.message} ({self.resource or '?'}): {self.description or '?'}"
        if self.field_errors:
            details = ", ".join(
                f"{err.field}={err.error_code}" for err in self.field_errors
            )
            text = f"{text} | {details}"
        return text


@dataclass(frozen=True, slots=True)
class ShortenOutcome:
    """Result of one item of a pipeline run.

    Exactly one of bitlink or error is set. The long_url is the input as
    given, so results can be correlated without relying on position.
    """

    long_url: str
    bitlink: Bitlink | None = None
    error: BitcliError | None = None

    def __post_init__(self) -> None:
        """Validate that the outcome is either a success or a failure."""
        if (self.bitlink is None) == (self.error is None):
            raise ValueError("ShortenOutcome needs exactly one of bitlink or error")

    @property
    def ok(self) -> bool:
        """Whether the item was shortened."""
        return self.bitlink is not None
