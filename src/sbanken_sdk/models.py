"""Pydantic models for the Sbanken SDK.

Token models are frozen so a snapshot handed out by the token provider can
never change under the caller. Resource models map Sbanken's camelCase JSON
onto snake_case attributes and ignore fields they do not know.
"""

from __future__ import annotations

import base64
from datetime import UTC, datetime, timedelta
from typing import Annotated, Generic, Self, TypeVar

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic.alias_generators import to_camel

from .errors import ApiError

T = TypeVar("T")


class TokenResponse(BaseModel):
    """Client credentials response from the identity server."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str = Field(..., min_length=1)
    token_type: str = Field(default="Bearer")
    expires_in: Annotated[int, Field(ge=0)]


class AccessToken(BaseModel):
    """Cached access token with expiration tracking."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    token_type: str
    issued_at: datetime
    expires_at: datetime

    @classmethod
    def from_response(
        cls,
        response: TokenResponse,
        *,
        issued_at: datetime | None = None,
    ) -> Self:
        """Create AccessToken from TokenResponse, expiring ``expires_in`` seconds after issue."""
        issued_at = issued_at or datetime.now(UTC)
        return cls(
            access_token=response.access_token,
            token_type=response.token_type,
            issued_at=issued_at,
            expires_at=issued_at + timedelta(seconds=response.expires_in),
        )

    def is_expired(self, leeway_seconds: int = 0) -> bool:
        """Check if token is expired, or will be within ``leeway_seconds``."""
        return datetime.now(UTC) >= self.expires_at - timedelta(seconds=leeway_seconds)

    @property
    def lifetime(self) -> timedelta:
        """Validity period granted by the identity server."""
        return self.expires_at - self.issued_at

    def time_until_expiry(self) -> timedelta:
        """Get time remaining until token expires."""
        return self.expires_at - datetime.now(UTC)


class ClientCredentials(BaseModel):
    """Identity server location and the client id/secret pair."""

    model_config = ConfigDict(frozen=True)

    identity_server_url: str = Field(..., min_length=1)
    client_id: str = Field(..., min_length=1)
    client_secret: SecretStr

    def basic_authorization(self) -> str:
        """Value for the ``Authorization`` header of the token request."""
        raw = f"{self.client_id}:{self.client_secret.get_secret_value()}"
        return "Basic " + base64.b64encode(raw.encode("utf-8")).decode("ascii")


class WireModel(BaseModel):
    """Base for models exchanged with the resource API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ErrorEnvelope(WireModel):
    """Error fields present on every Sbanken response."""

    is_error: bool = False
    error_message: str | None = None
    error_type: str | None = None
    error_code: int | None = None
    trace_id: str | None = None

    def raise_for_error(self, *, status_code: int | None = None) -> None:
        """Raise :class:`ApiError` if the API flagged this response as an error."""
        if not self.is_error:
            return

        details = {
            key: value
            for key, value in (
                ("error_type", self.error_type),
                ("error_code", self.error_code),
                ("trace_id", self.trace_id),
            )
            if value is not None
        }
        raise ApiError(
            self.error_message or "Unknown API error",
            status_code=status_code,
            details=details,
        )


class ItemResponse(ErrorEnvelope, Generic[T]):
    """Envelope around a single resource."""

    item: T | None = None


class ItemsResponse(ErrorEnvelope, Generic[T]):
    """Envelope around a list of resources."""

    available_items: int = 0
    items: list[T] = Field(default_factory=list)


class Account(WireModel):
    """A bank account."""

    account_id: str | None = None
    account_number: str | None = None
    customer_id: str | None = None
    owner_customer_id: str | None = None
    name: str | None = None
    account_type: str | None = None
    available: float = 0.0
    balance: float = 0.0
    credit_limit: float = 0.0
    default_account: bool = False


class Customer(WireModel):
    """The customer the API application acts on behalf of."""

    customer_id: str
    first_name: str | None = None
    last_name: str | None = None
    email_address: str | None = None
    date_of_birth: datetime | None = None


class Transaction(WireModel):
    """A booked or reserved account transaction."""

    accounting_date: datetime | None = None
    interest_date: datetime | None = None
    other_account_number: str | None = None
    amount: float = 0.0
    text: str | None = None
    transaction_type: str | None = None
    transaction_type_code: int | None = None
    transaction_type_text: str | None = None
    is_reservation: bool = False
    reservation_type: str | None = None
    source: str | None = None


class TransferRequest(WireModel):
    """Transfer between two of the customer's own accounts."""

    model_config = ConfigDict(frozen=True)

    from_account_id: str = Field(..., min_length=1)
    to_account_id: str = Field(..., min_length=1)
    amount: Annotated[float, Field(gt=0)]
    message: str | None = None
