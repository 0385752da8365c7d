"""Unit tests for the client credentials token provider."""

from __future__ import annotations

import base64
from datetime import UTC, datetime, timedelta
from urllib.parse import parse_qs

import httpx
import pytest

from sbanken_sdk.core.token_ops import TokenProvider
from sbanken_sdk.errors import (
    NetworkError,
    TimeoutError,
    TokenExpiredError,
    TokenRequestError,
)
from sbanken_sdk.models import ClientCredentials
from tests.conftest import IDENTITY_SERVER, FakeSbanken


def make_provider(fake: FakeSbanken) -> TokenProvider:
    return TokenProvider(
        ClientCredentials(
            identity_server_url=IDENTITY_SERVER,
            client_id="test-client-id",
            client_secret="test-client-secret",
        ),
        http_client=fake.client(),
    )


def provider_with_handler(handler) -> TokenProvider:
    return TokenProvider(
        ClientCredentials(
            identity_server_url=IDENTITY_SERVER,
            client_id="test-client-id",
            client_secret="test-client-secret",
        ),
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


class TestTokenRequest:
    """The grant request sent to the identity server."""

    def test_request_shape(self, fake_sbanken: FakeSbanken) -> None:
        make_provider(fake_sbanken).obtain_token()

        [request] = fake_sbanken.token_requests
        assert request.method == "POST"
        assert str(request.url) == IDENTITY_SERVER
        assert request.headers["Accept"] == "application/json"
        assert (
            request.headers["Content-Type"]
            == "application/x-www-form-urlencoded; charset=utf-8"
        )
        assert parse_qs(request.content.decode()) == {"grant_type": ["client_credentials"]}

    def test_basic_authorization_header(self, fake_sbanken: FakeSbanken) -> None:
        make_provider(fake_sbanken).obtain_token()

        [request] = fake_sbanken.token_requests
        scheme, encoded = request.headers["Authorization"].split(" ", 1)
        assert scheme == "Basic"
        assert base64.b64decode(encoded) == b"test-client-id:test-client-secret"


class TestObtain:
    """Tests for obtaining a token."""

    def test_obtain_classmethod(self, fake_sbanken: FakeSbanken) -> None:
        provider = TokenProvider.obtain(
            IDENTITY_SERVER,
            "test-client-id",
            "test-client-secret",
            http_client=fake_sbanken.client(),
        )

        assert provider.token_string == "access-token-1"
        assert provider.token_type == "Bearer"
        assert len(fake_sbanken.token_requests) == 1

    def test_expiry_is_issue_time_plus_lifetime(self, fake_sbanken: FakeSbanken) -> None:
        fake_sbanken.token_body["expires_in"] = 900
        provider = make_provider(fake_sbanken)

        before = datetime.now(UTC)
        provider.obtain_token()
        after = datetime.now(UTC)

        assert before + timedelta(seconds=900) <= provider.expires_at
        assert provider.expires_at <= after + timedelta(seconds=900)

    def test_constructor_does_not_fetch(self, fake_sbanken: FakeSbanken) -> None:
        provider = make_provider(fake_sbanken)

        assert fake_sbanken.token_requests == []
        assert provider.is_expired()

    def test_accessors_before_obtain(self, fake_sbanken: FakeSbanken) -> None:
        provider = make_provider(fake_sbanken)

        with pytest.raises(TokenExpiredError):
            provider.token_string
        with pytest.raises(TokenExpiredError):
            provider.expires_at


class TestRefresh:
    """Tests for refresh and transparent refresh."""

    def test_refresh_replaces_all_fields(self, fake_sbanken: FakeSbanken) -> None:
        provider = make_provider(fake_sbanken)
        first = provider.obtain_token()

        fake_sbanken.token_body = {
            "access_token": "access-token-2",
            "token_type": "bearer",
            "expires_in": 60,
        }
        second = provider.refresh()

        assert provider.token is second
        assert second.access_token == "access-token-2"
        assert second.token_type == "bearer"
        assert second.expires_at < first.expires_at
        assert first.access_token == "access-token-1"

    def test_get_valid_token_reuses_fresh_token(self, fake_sbanken: FakeSbanken) -> None:
        provider = make_provider(fake_sbanken)

        first = provider.get_valid_token()
        second = provider.get_valid_token()

        assert first is second
        assert len(fake_sbanken.token_requests) == 1

    def test_get_valid_token_refreshes_expired_token(self, fake_sbanken: FakeSbanken) -> None:
        fake_sbanken.token_body["expires_in"] = 0
        provider = make_provider(fake_sbanken)

        provider.get_valid_token()
        provider.get_valid_token()

        assert len(fake_sbanken.token_requests) == 2

    def test_get_valid_token_honours_leeway(self, fake_sbanken: FakeSbanken) -> None:
        fake_sbanken.token_body["expires_in"] = 100
        provider = make_provider(fake_sbanken)
        provider.obtain_token()

        # Within the leeway of a token that has 100 seconds left.
        assert provider.is_expired(leeway_seconds=100)
        assert not provider.is_expired(leeway_seconds=50)

    def test_leeway_capped_for_short_lived_tokens(self, fake_sbanken: FakeSbanken) -> None:
        fake_sbanken.token_body["expires_in"] = 30
        provider = make_provider(fake_sbanken)

        first = provider.get_valid_token(leeway_seconds=60)
        second = provider.get_valid_token(leeway_seconds=60)

        assert first is second
        assert len(fake_sbanken.token_requests) == 1


class TestTokenErrors:
    """Identity server failures surface as typed errors."""

    def test_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError) as exc_info:
            provider_with_handler(handler).obtain_token()

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(TimeoutError):
            provider_with_handler(handler).obtain_token()

    def test_rejected_credentials(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "invalid_client"})

        with pytest.raises(TokenRequestError) as exc_info:
            provider_with_handler(handler).obtain_token()

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "invalid_client"

    def test_invalid_token_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>maintenance</html>")

        with pytest.raises(TokenRequestError, match="Invalid token response"):
            provider_with_handler(handler).obtain_token()

    def test_failed_refresh_keeps_previous_token(self, fake_sbanken: FakeSbanken) -> None:
        provider = make_provider(fake_sbanken)
        token = provider.obtain_token()

        fake_sbanken.token_body = {"token_type": "Bearer"}

        with pytest.raises(TokenRequestError):
            provider.refresh()
        assert provider.token is token


class TestLifecycle:
    """Tests for client ownership."""

    def test_injected_client_not_closed(self, fake_sbanken: FakeSbanken) -> None:
        http_client = fake_sbanken.client()
        provider = TokenProvider(
            ClientCredentials(
                identity_server_url=IDENTITY_SERVER,
                client_id="id",
                client_secret="secret",
            ),
            http_client=http_client,
        )

        provider.close()

        assert not http_client.is_closed

    def test_owned_client_closed(self) -> None:
        with TokenProvider(
            ClientCredentials(
                identity_server_url=IDENTITY_SERVER,
                client_id="id",
                client_secret="secret",
            )
        ) as provider:
            http_client = provider._http

        assert http_client.is_closed
