"""HTTP client factory for the Sbanken SDK."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from .config import SbankenConfig

USER_AGENT = "sbanken-sdk/0.1.0 Python"


def create_http_client(config: SbankenConfig) -> httpx.Client:
    """Create configured sync HTTP client.

    Endpoints in the config are absolute, so no base URL is set. Auth is
    applied per request by the executor, never on the client, so the same
    client can also talk to the identity server.

    Args:
        config: SDK configuration.

    Returns:
        Configured httpx.Client.
    """
    return httpx.Client(
        timeout=httpx.Timeout(
            config.timeout,
            connect=config.connect_timeout,
        ),
        headers={
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        },
        follow_redirects=False,
    )
