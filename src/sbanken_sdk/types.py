"""Type definitions for the Sbanken SDK."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, Protocol, TypeVar, runtime_checkable

import httpx

T = TypeVar("T")


@runtime_checkable
class ByteSink(Protocol):
    """Anything a response body can be streamed into, e.g. an open binary file."""

    def write(self, data: bytes, /) -> Any: ...


@dataclass(frozen=True)
class RequestDescriptor:
    """A single request to the resource API."""

    method: str
    url: str
    query_params: Mapping[str, str] = field(default_factory=dict)
    body: Optional[Any] = None


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """Executed request.

    ``content`` holds the raw body unless it was streamed into a sink;
    ``data`` holds the decoded model when a result type was requested.
    """

    status_code: int
    headers: httpx.Headers
    content: bytes = b""
    data: Optional[T] = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300
