"""Configuration for the Sbanken SDK.

Uses Pydantic v2 for validation. Field names are snake_case in Python and
camelCase in configuration files, matching the keys Sbanken hands out with
an API application (``clientId``, ``clientSecret``, ``identityServer``...).
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    SecretStr,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .errors import InvalidConfigError

DEFAULT_IDENTITY_SERVER = "https://auth.sbanken.no/identityserver/connect/token"


class AuthScheme(StrEnum):
    """How resource requests are authenticated."""

    BEARER = "bearer"
    CUSTOMER_ID = "customer_id"
    BEARER_WITH_CUSTOMER_ID = "bearer_with_customer_id"

    @property
    def uses_bearer_token(self) -> bool:
        return self in (AuthScheme.BEARER, AuthScheme.BEARER_WITH_CUSTOMER_ID)

    @property
    def uses_customer_id(self) -> bool:
        return self in (AuthScheme.CUSTOMER_ID, AuthScheme.BEARER_WITH_CUSTOMER_ID)


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class TokenConfig(_ConfigModel):
    """Access token handling."""

    # Seconds before expiry at which a held token is considered stale.
    refresh_leeway: Annotated[int, Field(ge=0, le=3600)] = 60


class TelemetryConfig(_ConfigModel):
    """Logging and tracing configuration."""

    enabled: bool = True
    service_name: str = "sbanken-sdk"
    log_level: str = "INFO"


class SbankenConfig(_ConfigModel):
    """Main configuration for the Sbanken SDK."""

    # Credentials
    client_id: str = Field(..., min_length=1)
    client_secret: SecretStr
    identity_server: HttpUrl = Field(
        default=DEFAULT_IDENTITY_SERVER, validate_default=True
    )

    # Resource endpoints
    accounts_endpoint: str | None = None
    transactions_endpoint: str | None = None
    transfers_endpoint: str | None = None
    customers_endpoint: str | None = None

    # Resource authentication
    customer_id: str | None = None
    auth_scheme: AuthScheme = AuthScheme.BEARER

    # HTTP settings
    timeout: Annotated[float, Field(gt=0, le=300)] = 30.0
    connect_timeout: Annotated[float, Field(gt=0, le=60)] = 10.0

    # Sub-configurations
    token: TokenConfig = Field(default_factory=TokenConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    @model_validator(mode="after")
    def check_customer_id(self) -> Self:
        """A customerId header cannot be sent without a customer id."""
        if self.auth_scheme.uses_customer_id and not self.customer_id:
            msg = f"customer_id is required for auth scheme {self.auth_scheme.value!r}"
            raise ValueError(msg)
        return self

    @property
    def identity_server_url(self) -> str:
        """Identity server token URL as a string."""
        return str(self.identity_server)

    def require_endpoint(self, name: str) -> str:
        """Return a configured resource endpoint without trailing slash.

        Raises:
            InvalidConfigError: If the endpoint is not configured.
        """
        value = getattr(self, name)
        if not value:
            raise InvalidConfigError(f"{name} is not configured", field=name)
        return value.rstrip("/")

    def with_overrides(self, **kwargs: Any) -> Self:
        """Create new config with overridden values."""
        data = self.model_dump()
        data["client_secret"] = self.client_secret.get_secret_value()
        data.update(kwargs)
        return self.__class__(**data)

    @classmethod
    def from_file(cls, path: str | Path) -> Self:
        """Load config from a JSON file.

        Raises:
            InvalidConfigError: If the file cannot be read or is not a
                valid configuration.
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise InvalidConfigError(
                f"Cannot read config file {path}: {e}", cause=e
            ) from e

        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            raise _config_error(e, source=str(path)) from e

    @classmethod
    def from_env(cls, prefix: str = "SBANKEN_") -> Self:
        """Create config from environment variables."""
        import os

        def get_env(key: str, default: Any = None) -> Any:
            return os.environ.get(f"{prefix}{key}", default)

        data: dict[str, Any] = {}
        for key in ("CLIENT_ID", "CLIENT_SECRET"):
            value = get_env(key)
            if not value:
                raise InvalidConfigError(
                    f"{prefix}{key} environment variable is required",
                    field=key.lower(),
                )
            data[key.lower()] = value

        optional = (
            "IDENTITY_SERVER",
            "ACCOUNTS_ENDPOINT",
            "TRANSACTIONS_ENDPOINT",
            "TRANSFERS_ENDPOINT",
            "CUSTOMERS_ENDPOINT",
            "CUSTOMER_ID",
            "AUTH_SCHEME",
            "TIMEOUT",
        )
        for key in optional:
            value = get_env(key)
            if value:
                data[key.lower()] = value

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise _config_error(e, source="environment") from e


def _config_error(exc: ValidationError, *, source: str) -> InvalidConfigError:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or None
    return InvalidConfigError(
        f"Invalid configuration in {source}: {first['msg']}",
        field=field,
        cause=exc,
    )
