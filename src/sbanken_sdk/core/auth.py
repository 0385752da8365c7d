"""Authentication strategies for resource API requests.

Both Sbanken API generations are served by one client: the strategy picked
from :class:`~sbanken_sdk.config.AuthScheme` decides which headers a
request carries.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import TYPE_CHECKING

import httpx

from ..errors import InvalidConfigError

if TYPE_CHECKING:
    from ..config import SbankenConfig
    from .token_ops import TokenProvider


class BearerTokenAuth(httpx.Auth):
    """Sets ``Authorization: Bearer <token>``, refreshing the token when stale."""

    def __init__(self, token_provider: TokenProvider, leeway_seconds: int = 0) -> None:
        self._token_provider = token_provider
        self._leeway_seconds = leeway_seconds

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        token = self._token_provider.get_valid_token(self._leeway_seconds)
        request.headers["Authorization"] = f"Bearer {token.access_token}"
        yield request


class CustomerIdAuth(httpx.Auth):
    """Sets the ``customerId`` header."""

    def __init__(self, customer_id: str) -> None:
        self._customer_id = customer_id

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["customerId"] = self._customer_id
        yield request


class CompositeAuth(httpx.Auth):
    """Applies several single-request strategies in order."""

    def __init__(self, *strategies: httpx.Auth) -> None:
        self._strategies = strategies

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        for strategy in self._strategies:
            # Each strategy yields exactly once; the first yield is the
            # request with its headers applied.
            request = next(strategy.auth_flow(request))
        yield request


def build_auth(config: SbankenConfig, token_provider: TokenProvider) -> httpx.Auth:
    """Build the auth strategy for the configured scheme.

    Args:
        config: SDK configuration.
        token_provider: Token source for bearer authentication.

    Returns:
        An httpx.Auth to pass with every resource request.
    """
    strategies: list[httpx.Auth] = []
    if config.auth_scheme.uses_bearer_token:
        strategies.append(
            BearerTokenAuth(token_provider, config.token.refresh_leeway)
        )
    if config.auth_scheme.uses_customer_id:
        if not config.customer_id:
            raise InvalidConfigError(
                f"customer_id is required for auth scheme {config.auth_scheme.value!r}",
                field="customer_id",
            )
        strategies.append(CustomerIdAuth(config.customer_id))

    if len(strategies) == 1:
        return strategies[0]
    return CompositeAuth(*strategies)
