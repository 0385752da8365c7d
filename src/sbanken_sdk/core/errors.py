"""Centralized error factory for the Sbanken SDK.

Provides consistent error creation and transformation across all SDK components.
"""

from __future__ import annotations

import uuid
from typing import Any

import httpx

from ..errors import NetworkError, SbankenError, TimeoutError, TokenRequestError


class ErrorFactory:
    """Centralized error creation with consistent structure.

    All errors created through this factory include:
    - Standardized error codes
    - Optional correlation IDs for tracing
    - The original exception chained as ``__cause__``
    """

    @staticmethod
    def generate_correlation_id() -> str:
        """Generate a unique correlation ID."""
        return str(uuid.uuid4())

    @staticmethod
    def from_token_response(
        response: httpx.Response,
        *,
        correlation_id: str | None = None,
    ) -> TokenRequestError:
        """Create error from a non-2xx identity server response.

        Args:
            response: HTTP response object, body already read.
            correlation_id: Optional correlation ID for tracing.

        Returns:
            TokenRequestError with the OAuth error fields as details.
        """
        status = response.status_code
        correlation_id = correlation_id or ErrorFactory.generate_correlation_id()

        details: dict[str, Any] = {}
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ("error", "error_description"):
                if body.get(key):
                    details[key] = body[key]

        message = details.get("error_description") or details.get("error")
        return TokenRequestError(
            message or f"Identity server returned status {status}",
            status_code=status,
            correlation_id=correlation_id,
            details=details,
        )

    @staticmethod
    def from_exception(
        exc: Exception,
        *,
        correlation_id: str | None = None,
    ) -> SbankenError:
        """Create SDK error from exception.

        Args:
            exc: Original exception.
            correlation_id: Optional correlation ID for tracing.

        Returns:
            Appropriate SbankenError subclass.
        """
        correlation_id = correlation_id or ErrorFactory.generate_correlation_id()

        if isinstance(exc, SbankenError):
            if exc.correlation_id is None:
                exc.correlation_id = correlation_id
            return exc

        if isinstance(exc, httpx.TimeoutException):
            return TimeoutError(
                str(exc) or "Request timed out",
                correlation_id=correlation_id,
                cause=exc,
            )

        return NetworkError(
            str(exc) or exc.__class__.__name__,
            correlation_id=correlation_id,
            cause=exc,
        )
