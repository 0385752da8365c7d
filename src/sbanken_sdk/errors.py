"""Error classes for the Sbanken SDK.

Every failure the SDK can hit surfaces as a subclass of :class:`SbankenError`
with a stable error code, so callers decide what is fatal.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the Sbanken SDK."""

    # Authentication errors (1xxx)
    TOKEN_EXPIRED = "AUTH_1001"
    TOKEN_REQUEST_FAILED = "AUTH_1002"

    # Configuration errors (2xxx)
    INVALID_CONFIG = "CFG_2001"

    # Network errors (3xxx)
    NETWORK_ERROR = "NET_3001"
    TIMEOUT_ERROR = "NET_3002"

    # Payload errors (4xxx)
    DECODE_ERROR = "DATA_4001"
    ENCODE_ERROR = "DATA_4002"

    # Business errors reported by the API envelope (5xxx)
    API_ERROR = "API_5001"


class SbankenError(Exception):
    """Base error for the Sbanken SDK with structured error information."""

    def __init__(
        self,
        message: str,
        code: ErrorCode | str,
        *,
        status_code: int | None = None,
        correlation_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = str(code)
        self.status_code = status_code
        self.correlation_id = correlation_id
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "correlation_id": self.correlation_id,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class TokenExpiredError(SbankenError):
    """No valid access token is held."""

    def __init__(
        self,
        message: str = "Access token has expired",
        *,
        correlation_id: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.TOKEN_EXPIRED,
            status_code=401,
            correlation_id=correlation_id,
        )


class TokenRequestError(SbankenError):
    """The identity server did not hand out a token."""

    def __init__(
        self,
        message: str = "Token request failed",
        *,
        status_code: int | None = None,
        correlation_id: str | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.TOKEN_REQUEST_FAILED,
            status_code=status_code,
            correlation_id=correlation_id,
            details=details,
        )
        self.__cause__ = cause


class NetworkError(SbankenError):
    """Network request failed."""

    def __init__(
        self,
        message: str = "Network request failed",
        *,
        correlation_id: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.NETWORK_ERROR,
            correlation_id=correlation_id,
            details={"cause": str(cause)} if cause else None,
        )
        self.__cause__ = cause


class TimeoutError(SbankenError):
    """Request timed out."""

    def __init__(
        self,
        message: str = "Request timed out",
        *,
        correlation_id: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.TIMEOUT_ERROR,
            status_code=408,
            correlation_id=correlation_id,
        )
        self.__cause__ = cause


class DecodeError(SbankenError):
    """Response body could not be decoded into the requested type."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.DECODE_ERROR,
            status_code=status_code,
        )
        self.__cause__ = cause


class EncodeError(SbankenError):
    """Request body could not be serialized to JSON."""

    def __init__(
        self,
        message: str,
        *,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.ENCODE_ERROR)
        self.__cause__ = cause


class ApiError(SbankenError):
    """The API answered with ``isError`` set in its response envelope."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.API_ERROR,
            status_code=status_code,
            details=details,
        )


class InvalidConfigError(SbankenError):
    """Invalid SDK configuration."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.INVALID_CONFIG,
            details={"field": field} if field else None,
        )
        self.field = field
        self.__cause__ = cause
