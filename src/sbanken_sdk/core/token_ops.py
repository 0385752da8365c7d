"""Client credentials token handling for the Sbanken SDK.

The provider holds one access token per set of credentials. The token is
kept as a single frozen snapshot and replaced wholesale on refresh, so
readers never see fields from two different grants.
"""

from __future__ import annotations

import threading
from datetime import UTC, datetime
from typing import Any, Self

import httpx
from pydantic import SecretStr, ValidationError

from ..errors import TokenExpiredError, TokenRequestError
from ..http import USER_AGENT
from ..models import AccessToken, ClientCredentials, TokenResponse
from ..telemetry import error_fields, get_logger, trace_operation
from .errors import ErrorFactory

CLIENT_CREDENTIALS_BODY = "grant_type=client_credentials"


class TokenProvider:
    """Obtains and caches a bearer token using the client credentials grant.

    Constructing a provider does not touch the network; use :meth:`obtain`
    for a provider that already holds a token, or call
    :meth:`get_valid_token`, which fetches on first use and whenever the
    held token has expired.
    """

    def __init__(
        self,
        credentials: ClientCredentials,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize token provider.

        Args:
            credentials: Identity server URL and client id/secret.
            http_client: Optional HTTP client. A private one is created
                (and closed by :meth:`close`) when omitted.
        """
        self._credentials = credentials
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(headers={"User-Agent": USER_AGENT})
        self._token: AccessToken | None = None
        self._lock = threading.RLock()
        self._logger = get_logger(client_id=credentials.client_id)

    @classmethod
    def obtain(
        cls,
        identity_server_url: str,
        client_id: str,
        client_secret: str | SecretStr,
        *,
        http_client: httpx.Client | None = None,
    ) -> Self:
        """Create a provider and perform the initial token request.

        Raises:
            TokenRequestError: If the identity server refuses the request.
            NetworkError: On transport failure.
        """
        provider = cls(
            ClientCredentials(
                identity_server_url=identity_server_url,
                client_id=client_id,
                client_secret=client_secret,
            ),
            http_client=http_client,
        )
        provider.obtain_token()
        return provider

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_http:
            self._http.close()

    @property
    def credentials(self) -> ClientCredentials:
        return self._credentials

    @property
    def token(self) -> AccessToken:
        """Current token snapshot.

        Raises:
            TokenExpiredError: If no token has been obtained yet.
        """
        token = self._token
        if token is None:
            raise TokenExpiredError("No access token has been obtained")
        return token

    @property
    def token_string(self) -> str:
        return self.token.access_token

    @property
    def token_type(self) -> str:
        return self.token.token_type

    @property
    def expires_at(self) -> datetime:
        return self.token.expires_at

    def is_expired(self, leeway_seconds: int = 0) -> bool:
        """Check if the held token is missing or expired."""
        token = self._token
        return token is None or token.is_expired(leeway_seconds)

    def obtain_token(self) -> AccessToken:
        """Request a new token and make it the current one."""
        with self._lock:
            self._token = self._request_token()
            return self._token

    def refresh(self) -> AccessToken:
        """Re-run the grant, replacing the current token."""
        self._logger.debug("Refreshing access token")
        return self.obtain_token()

    def get_valid_token(self, leeway_seconds: int = 0) -> AccessToken:
        """Get a token that is valid for at least ``leeway_seconds``.

        Fetches a token if none is held, refreshes it if it has expired.
        The leeway is capped at half the token lifetime, so short-lived
        tokens are still reused.
        """
        with self._lock:
            token = self._token
            if token is not None:
                half_life = int(token.lifetime.total_seconds()) // 2
                leeway_seconds = min(leeway_seconds, half_life)
            if token is None or token.is_expired(leeway_seconds):
                token = self.refresh() if token else self.obtain_token()
            return token

    def build_token_request_headers(self) -> dict[str, str]:
        """Build headers for the token request."""
        return {
            "Accept": "application/json",
            "Authorization": self._credentials.basic_authorization(),
            "Content-Type": "application/x-www-form-urlencoded; charset=utf-8",
        }

    def _request_token(self) -> AccessToken:
        url = self._credentials.identity_server_url

        with trace_operation("token_request", attributes={"http.url": url}):
            issued_at = datetime.now(UTC)
            try:
                response = self._http.post(
                    url,
                    content=CLIENT_CREDENTIALS_BODY,
                    headers=self.build_token_request_headers(),
                )
            except httpx.HTTPError as e:
                error = ErrorFactory.from_exception(e)
                self._logger.warning("Token request failed", url=url, **error_fields(error))
                raise error from e

            if not response.is_success:
                error = ErrorFactory.from_token_response(response)
                self._logger.warning(
                    "Token request rejected",
                    url=url,
                    **error_fields(error),
                )
                raise error

            try:
                token_response = TokenResponse.model_validate_json(response.content)
            except ValidationError as e:
                raise TokenRequestError(
                    f"Invalid token response: {e}",
                    status_code=response.status_code,
                    cause=e,
                ) from e

        token = AccessToken.from_response(token_response, issued_at=issued_at)
        self._logger.info(
            "Obtained access token",
            token_type=token.token_type,
            expires_at=token.expires_at.isoformat(),
        )
        return token
