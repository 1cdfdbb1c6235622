"""Bitly API adapter using httpx."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from bitcli.adapters.remote.payloads import (
    BitlinkPayload,
    ErrorPayload,
    ShortenPayload,
    UserPayload,
)
from bitcli.config import APP, DEFAULT_API_URL, DEFAULT_TIMEOUT
from bitcli.core.exceptions import (
    OfflineError,
    ProtocolViolationError,
    RemoteRejectedError,
    TransportError,
)


if TYPE_CHECKING:
    from types import TracebackType

    from bitcli.core.models import Bitlink, ShortenRequest, UserInfo


logger = logging.getLogger(__name__)

P = TypeVar("P", bound=BaseModel)

codes = httpx.codes

# https://dev.bitly.com/api-reference/#getUser
_USER_OK = frozenset({codes.OK})
_USER_REJECTED = frozenset(
    {
        codes.FORBIDDEN,
        codes.NOT_FOUND,
        codes.INTERNAL_SERVER_ERROR,
        codes.SERVICE_UNAVAILABLE,
    }
)

# https://dev.bitly.com/api-reference/#createBitlink
_SHORTEN_OK = frozenset({codes.OK, codes.CREATED})
_SHORTEN_REJECTED = frozenset(
    {
        codes.BAD_REQUEST,
        codes.FORBIDDEN,
        codes.GONE,
        codes.EXPECTATION_FAILED,
        codes.UNPROCESSABLE_ENTITY,
        codes.TOO_MANY_REQUESTS,
        codes.INTERNAL_SERVER_ERROR,
        codes.SERVICE_UNAVAILABLE,
    }
)


class BitlyClient:
    """Client for the two Bitly endpoints the pipeline needs.

    Implements RemotePort. The underlying httpx.Client is thread-safe, so a
    single instance is shared read-only by all concurrent shorten operations.
    """

    def __init__(
        self,
        api_token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        offline: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_token: Bearer token for the API.
            api_url: Base URL of the API (without the /v4 prefix).
            offline: Refuse every request with OfflineError when True.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests.
        """
        self._offline = offline
        self._http = httpx.Client(
            base_url=api_url,
            timeout=httpx.Timeout(timeout),
            headers={
                "Authorization": f"Bearer {api_token}",
                "Accept": "application/json",
                "User-Agent": APP,
            },
            transport=transport,
        )

    @property
    def offline(self) -> bool:
        """Whether API requests are disabled."""
        return self._offline

    def fetch_user(self) -> UserInfo:
        """Fetch the authenticated user (``GET /v4/user``).

        Raises:
            OfflineError: In offline mode.
            TransportError: If the request fails at the network level.
            RemoteRejectedError: On a documented error status.
            ProtocolViolationError: On any other status or a malformed body.
        """
        if self._offline:
            raise OfflineError("fetch_user")

        response = self._send("GET", "/v4/user")
        payload = _parse_response(response, UserPayload, _USER_OK, _USER_REJECTED)
        return payload.to_user_info()

    def create_shortlink(self, request: ShortenRequest) -> Bitlink:
        """Shorten a URL (``POST /v4/shorten``).

        Raises:
            OfflineError: In offline mode.
            TransportError: If the request fails at the network level.
            RemoteRejectedError: On a documented error status.
            ProtocolViolationError: On any other status or a malformed body.
        """
        if self._offline:
            raise OfflineError("create_shortlink")

        body = ShortenPayload(
            long_url=request.long_url,
            domain=request.domain,
            group_guid=request.group_id,
        )
        response = self._send("POST", "/v4/shorten", json=body.to_json())
        payload = _parse_response(
            response, BitlinkPayload, _SHORTEN_OK, _SHORTEN_REJECTED
        )
        return payload.to_bitlink()

    def _send(self, method: str, path: str, **kwargs: object) -> httpx.Response:
        try:
            response = self._http.request(method, path, **kwargs)  # type: ignore[arg-type]
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}", cause=e) from e

        logger.debug("%s %s -> %d", method, path, response.status_code)
        return response

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()

    def __enter__(self) -> BitlyClient:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the client."""
        self.close()


def _parse_response(
    response: httpx.Response,
    payload_type: type[P],
    ok: frozenset[int],
    rejected: frozenset[int],
) -> P:
    """Classify a response by status and decode its body.

    Returns:
        The decoded success payload.

    Raises:
        RemoteRejectedError: On a status in ``rejected`` with a valid error body.
        ProtocolViolationError: On an unknown status, or a body that does not
            decode for a known one.
    """
    status = response.status_code

    if status in ok:
        try:
            return payload_type.model_validate_json(response.content)
        except ValidationError as e:
            raise ProtocolViolationError(f"invalid response {e}", status) from e

    if status in rejected:
        try:
            error = ErrorPayload.model_validate_json(response.content)
        except ValidationError as e:
            raise ProtocolViolationError(f"invalid error response {e}", status) from e
        raise RemoteRejectedError(error.to_envelope(), status_code=status)

    raise ProtocolViolationError(f"unexpected status code '{status}'", status)
