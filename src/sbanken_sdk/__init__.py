"""Sbanken Python SDK."""

from .client import SbankenClient
from .config import AuthScheme, SbankenConfig, TelemetryConfig, TokenConfig
from .core import RequestExecutor, TokenProvider
from .errors import (
    ApiError,
    DecodeError,
    EncodeError,
    ErrorCode,
    InvalidConfigError,
    NetworkError,
    SbankenError,
    TimeoutError,
    TokenExpiredError,
    TokenRequestError,
)
from .models import (
    AccessToken,
    Account,
    Customer,
    ErrorEnvelope,
    ItemResponse,
    ItemsResponse,
    Transaction,
    TransferRequest,
)
from .telemetry import configure_telemetry
from .types import ApiResponse, ByteSink, RequestDescriptor

__all__ = [
    "SbankenClient",
    "SbankenConfig",
    "AuthScheme",
    "TokenConfig",
    "TelemetryConfig",
    "RequestExecutor",
    "TokenProvider",
    "SbankenError",
    "ErrorCode",
    "ApiError",
    "DecodeError",
    "EncodeError",
    "InvalidConfigError",
    "NetworkError",
    "TimeoutError",
    "TokenExpiredError",
    "TokenRequestError",
    "AccessToken",
    "Account",
    "Customer",
    "ErrorEnvelope",
    "ItemResponse",
    "ItemsResponse",
    "Transaction",
    "TransferRequest",
    "ApiResponse",
    "ByteSink",
    "RequestDescriptor",
    "configure_telemetry",
]

__version__ = "0.1.0"
