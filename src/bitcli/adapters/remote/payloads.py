"""Wire payloads of the Bitly v4 API (Pydantic v2).

Only the fields the pipeline interprets are declared; anything else the
service sends is ignored. Response models are strict: a field of the wrong
JSON type fails decoding instead of being coerced. Each response payload
converts into its domain model from bitcli.core.models.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from bitcli.core.models import Bitlink, ErrorEnvelope, FieldError, UserInfo


class UserPayload(BaseModel):
    """Response of ``GET /v4/user``."""

    model_config = ConfigDict(extra="ignore", strict=True)

    is_active: bool
    default_group_guid: str

    def to_user_info(self) -> UserInfo:
        return UserInfo(
            is_active=self.is_active,
            default_group_id=self.default_group_guid,
        )


class ShortenPayload(BaseModel):
    """Request body of ``POST /v4/shorten``."""

    long_url: str
    domain: str | None = None
    group_guid: str

    def to_json(self) -> dict[str, str]:
        """Body as sent: domain is omitted to let the service pick its default."""
        return self.model_dump(exclude_none=True)


class BitlinkPayload(BaseModel):
    """Response of ``POST /v4/shorten``."""

    model_config = ConfigDict(extra="ignore", strict=True)

    id: str
    link: str
    long_url: str

    def to_bitlink(self) -> Bitlink:
        return Bitlink(short_url=self.link, id=self.id, long_url=self.long_url)


class FieldErrorPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", strict=True)

    field: str
    error_code: str
    message: str = ""


class ErrorPayload(BaseModel):
    """Error body shared by all endpoints."""

    model_config = ConfigDict(extra="ignore", strict=True)

    message: str
    description: str | None = None
    resource: str | None = None
    errors: list[FieldErrorPayload] | None = None

    def to_envelope(self) -> ErrorEnvelope:
        return ErrorEnvelope(
            message=self.message,
            description=self.description,
            resource=self.resource,
            field_errors=tuple(
                FieldError(field=e.field, error_code=e.error_code, message=e.message)
                for e in self.errors or ()
            ),
        )
