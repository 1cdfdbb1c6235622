"""Domain exceptions for bitcli.

Recoverable errors inherit from BitcliError, allowing callers to catch any
per-item failure with a single except clause. Each exception provides a
recovery_hint property with guidance on resolving the error.

ProtocolViolationError is outside that hierarchy: it signals a
broken contract with the remote service and must abort the run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from pathlib import Path

    from bitcli.core.models import ErrorEnvelope


class BitcliError(Exception):
    """Base class for all recoverable bitcli exceptions.

    Catch this to handle any error a single shorten operation can produce.
    """

    @property
    def recovery_hint(self) -> str | None:
        """Optional guidance on how to resolve this error."""
        return None


class OfflineError(BitcliError):
    """Raised when a remote call is attempted in offline mode.

    Attributes:
        operation: Name of the remote operation that was refused.
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Cannot {operation} in offline mode")

    @property
    def recovery_hint(self) -> str:
        """Suggest leaving offline mode."""
        return "Run without --offline to allow API requests"


class UnresolvedGroupError(BitcliError):
    """Raised when no group GUID is configured and none can be inferred.

    Attributes:
        reason: Why the default group could not be determined.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Cannot determine group GUID: {reason}")

    @property
    def recovery_hint(self) -> str:
        """Suggest configuring the group explicitly."""
        return "Set default_group_guid in the config file or pass --group-guid"


class TransportError(BitcliError):
    """Raised when a remote call fails at the network level.

    Attributes:
        detail: Description of the failure.
        cause: The underlying exception, if any.
    """

    def __init__(self, detail: str, cause: Exception | None = None) -> None:
        self.detail = detail
        self.cause = cause
        super().__init__(detail)

    @property
    def recovery_hint(self) -> str:
        """Suggest checking connectivity."""
        return "Check your network connection and the configured api_url"


class RemoteRejectedError(BitcliError):
    """Raised when the service answers with a well-formed error response.

    Attributes:
        envelope: The decoded error payload.
        status_code: HTTP status of the response.
    """

    def __init__(self, envelope: ErrorEnvelope, status_code: int | None = None) -> None:
        self.envelope = envelope
        self.status_code = status_code
        super().__init__(f"Bitly request failed with {envelope}")

    @property
    def recovery_hint(self) -> str | None:
        """Point at the usual suspects for well-known rejections."""
        if self.status_code == 403:
            return "Check that api_token is valid and allowed to use this group"
        if self.status_code == 429:
            return "API rate limit reached, try again later"
        return None


class InvalidUrlError(BitcliError):
    """Raised when an input item is not an absolute http(s) URL.

    Attributes:
        value: The offending input.
    """

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid URL: {value!r}")

    @property
    def recovery_hint(self) -> str:
        """Show the expected shape."""
        return "URLs must be absolute, e.g. https://example.com/page"


class ConfigurationError(BitcliError):
    """Raised when the configuration cannot be loaded or is invalid.

    Attributes:
        path: The config file that caused the error, if any.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.path = path
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the config file."""
        if self.path is not None:
            return f"Check {self.path} for syntax errors and required keys"
        return "Create a config.toml with at least api_token or pass --config-file"


class ProtocolViolationError(Exception):
    """Raised when the remote service breaks its documented contract.

    Either the status code is not one the endpoint is known to return, or the
    body of a recognised status does not decode into the expected shape.
    Not recoverable, never converted into a per-item result.

    Attributes:
        status_code: HTTP status of the offending response.
    """

    def __init__(self, message: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"API violation: {message}")
