"""Core components for the Sbanken SDK: tokens, auth and request execution."""

from __future__ import annotations

from .auth import BearerTokenAuth, CompositeAuth, CustomerIdAuth, build_auth
from .errors import ErrorFactory
from .http_executor import RequestExecutor, decode_body, encode_body
from .token_ops import TokenProvider

__all__ = [
    "BearerTokenAuth",
    "CompositeAuth",
    "CustomerIdAuth",
    "ErrorFactory",
    "RequestExecutor",
    "TokenProvider",
    "build_auth",
    "decode_body",
    "encode_body",
]
