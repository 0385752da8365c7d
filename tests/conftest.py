"""
Shared test fixtures for Sbanken SDK tests.

Provides configuration, canned API payloads and an httpx transport that
fakes both the identity server and the resource API.
"""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from sbanken_sdk.config import SbankenConfig

IDENTITY_SERVER = "https://auth.example.com/identityserver/connect/token"
API_BASE = "https://api.example.com/exec.bank/api/v1"


def make_config(**overrides: object) -> SbankenConfig:
    """Build a config pointing at the fake servers."""
    data: dict[str, object] = {
        "client_id": "test-client-id",
        "client_secret": "test-client-secret",
        "identity_server": IDENTITY_SERVER,
        "accounts_endpoint": f"{API_BASE}/Accounts",
        "transactions_endpoint": f"{API_BASE}/Transactions",
        "transfers_endpoint": f"{API_BASE}/Transfers",
        "customers_endpoint": "https://api.example.com/exec.customers/api/v1/Customers",
    }
    data.update(overrides)
    return SbankenConfig(**data)


class FakeSbanken:
    """Routes requests to the fake identity server or a per-test API handler."""

    def __init__(self, token_body: dict | None = None) -> None:
        self.token_body = token_body or {
            "access_token": "access-token-1",
            "token_type": "Bearer",
            "expires_in": 3600,
        }
        self.token_requests: list[httpx.Request] = []
        self.api_requests: list[httpx.Request] = []
        self.api_handler: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json={"isError": False})
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if str(request.url) == IDENTITY_SERVER:
            self.token_requests.append(request)
            return httpx.Response(200, json=self.token_body)
        self.api_requests.append(request)
        return self.api_handler(request)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


@pytest.fixture
def base_config() -> SbankenConfig:
    """Provide a basic SDK configuration for testing."""
    return make_config()


@pytest.fixture
def fake_sbanken() -> FakeSbanken:
    """Provide fake Sbanken servers."""
    return FakeSbanken()


@pytest.fixture
def sample_token_response() -> dict:
    """Provide a sample client credentials response."""
    return {
        "access_token": "eyJhbGciOiJSUzI1NiIsInR5cCI6IkpXVCJ9.test",
        "token_type": "Bearer",
        "expires_in": 3600,
    }


@pytest.fixture
def sample_accounts_response() -> dict:
    """Provide a sample accounts listing."""
    return {
        "availableItems": 2,
        "items": [
            {
                "accountId": "A1B2C3",
                "accountNumber": "97104133219",
                "ownerCustomerId": "12345678901",
                "name": "Brukskonto",
                "accountType": "Standard account",
                "available": 1234.5,
                "balance": 1300.0,
                "creditLimit": 0.0,
            },
            {
                "accountId": "D4E5F6",
                "accountNumber": "97104133227",
                "ownerCustomerId": "12345678901",
                "name": "Sparekonto",
                "accountType": "High interest account",
                "available": 50000.0,
                "balance": 50000.0,
                "creditLimit": 0.0,
            },
        ],
        "errorType": None,
        "isError": False,
        "errorMessage": None,
        "traceId": None,
    }
