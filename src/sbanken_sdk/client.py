"""Sbanken API client."""

from __future__ import annotations

from typing import Any, Self

import httpx

from .config import SbankenConfig
from .core.auth import build_auth
from .core.http_executor import RequestExecutor
from .core.token_ops import TokenProvider
from .http import create_http_client
from .models import ClientCredentials
from .services import (
    AccountsService,
    CustomersService,
    TransactionsService,
    TransfersService,
)
from .telemetry import get_logger


class SbankenClient:
    """Synchronous Sbanken client.

    Example::

        config = SbankenConfig.from_file("sbanken.json")
        with SbankenClient(config) as client:
            for account in client.accounts.list():
                print(account.name, account.balance)
    """

    def __init__(
        self,
        config: SbankenConfig,
        *,
        http_client: httpx.Client | None = None,
        token_provider: TokenProvider | None = None,
    ) -> None:
        """Initialize client.

        Args:
            config: SDK configuration.
            http_client: Optional HTTP client; it is not closed by :meth:`close`.
            token_provider: Optional token provider, e.g. one shared between
                several clients using the same credentials.
        """
        self.config = config
        self._owns_http = http_client is None
        self._http = http_client or create_http_client(config)
        self.token_provider = token_provider or TokenProvider(
            ClientCredentials(
                identity_server_url=config.identity_server_url,
                client_id=config.client_id,
                client_secret=config.client_secret,
            ),
            http_client=self._http,
        )
        self.executor = RequestExecutor(
            self._http, auth=build_auth(config, self.token_provider)
        )

        self.customers = CustomersService(self.executor, config)
        self.accounts = AccountsService(self.executor, config)
        self.transactions = TransactionsService(self.executor, config)
        self.transfers = TransfersService(self.executor, config)

        get_logger(client_id=config.client_id).debug(
            "Sbanken client created",
            auth_scheme=config.auth_scheme.value,
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this client created it."""
        if self._owns_http:
            self._http.close()
