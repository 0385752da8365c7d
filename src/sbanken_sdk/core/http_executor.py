"""Request executor for the Sbanken resource API.

Builds authenticated JSON requests, runs them and decodes the body into a
caller-supplied pydantic type, or streams it verbatim into a byte sink.
HTTP status codes and envelope error flags are left to the caller.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from ..errors import DecodeError, EncodeError
from ..telemetry import error_fields, get_logger, trace_operation
from ..types import ApiResponse, ByteSink, RequestDescriptor
from .errors import ErrorFactory

ModelT = TypeVar("ModelT", bound=BaseModel)

JSON_CONTENT_TYPE = "application/json"


def encode_body(body: Any) -> bytes:
    """Serialize a request body to JSON using wire (alias) names.

    Raises:
        EncodeError: If the value is not JSON serializable.
    """
    try:
        return to_json(body, by_alias=True, exclude_none=True)
    except PydanticSerializationError as e:
        raise EncodeError(f"Cannot serialize request body: {e}", cause=e) from e


def decode_body(
    content: bytes,
    result_type: type[ModelT],
    *,
    status_code: int | None = None,
) -> ModelT | None:
    """Decode a JSON body into ``result_type``.

    An empty body (or a bare JSON ``null``) is a successful response with
    no data: it decodes to the type's empty value, or to ``None`` when the
    type has required fields.

    Raises:
        DecodeError: If a non-empty body is not valid JSON for ``result_type``.
    """
    stripped = content.strip()
    if not stripped or stripped == b"null":
        try:
            return result_type.model_validate({})
        except ValidationError:
            return None
    try:
        return result_type.model_validate_json(content)
    except ValidationError as e:
        raise DecodeError(str(e), status_code=status_code, cause=e) from e


class RequestExecutor:
    """Executes requests against the resource API."""

    def __init__(
        self,
        client: httpx.Client,
        *,
        auth: httpx.Auth | None = None,
    ) -> None:
        """Initialize request executor.

        Args:
            client: HTTP client.
            auth: Strategy applied to every request.
        """
        self._client = client
        self._auth = auth
        self._logger = get_logger()

    def get(
        self,
        url: str,
        query_params: Mapping[str, str] | None = None,
        into: type[ModelT] | ByteSink | None = None,
    ) -> ApiResponse[Any]:
        """Send a GET request.

        Args:
            url: Absolute request URL.
            query_params: Query parameters added to the URL.
            into: Result type to decode into, or a sink for the raw body.

        Returns:
            The executed response.
        """
        request = RequestDescriptor("GET", url, dict(query_params or {}))
        return self.execute(request, into)

    def post(
        self,
        url: str,
        query_params: Mapping[str, str] | None = None,
        body: Any = None,
        into: type[ModelT] | ByteSink | None = None,
    ) -> ApiResponse[Any]:
        """Send a POST request with an optional JSON body.

        Args:
            url: Absolute request URL.
            query_params: Query parameters added to the URL.
            body: Pydantic model or other JSON serializable value.
            into: Result type to decode into, or a sink for the raw body.

        Returns:
            The executed response.
        """
        request = RequestDescriptor("POST", url, dict(query_params or {}), body)
        return self.execute(request, into)

    def build_headers(self, request: RequestDescriptor) -> dict[str, str]:
        """Build request headers; auth headers are added by the auth strategy."""
        headers = {"Accept": JSON_CONTENT_TYPE}
        if request.method == "POST":
            headers["Content-Type"] = JSON_CONTENT_TYPE
        return headers

    def execute(
        self,
        request: RequestDescriptor,
        into: type[ModelT] | ByteSink | None = None,
    ) -> ApiResponse[Any]:
        """Execute a request and handle its body.

        Args:
            request: What to send.
            into: Result type to decode into, or a sink for the raw body.

        Returns:
            The executed response.

        Raises:
            EncodeError: If the body cannot be serialized.
            NetworkError: On transport failure.
            TimeoutError: If the request timed out.
            DecodeError: If the body does not decode into ``into``.
        """
        content = encode_body(request.body) if request.body is not None else None

        with trace_operation(
            "http_request",
            attributes={"http.method": request.method, "http.url": request.url},
        ) as span:
            self._logger.debug(
                "Sending request",
                method=request.method,
                url=request.url,
            )
            try:
                with self._client.stream(
                    request.method,
                    request.url,
                    params=dict(request.query_params),
                    content=content,
                    headers=self.build_headers(request),
                    auth=self._auth if self._auth is not None else httpx.USE_CLIENT_DEFAULT,
                ) as response:
                    span.set_attribute("http.status_code", response.status_code)
                    return self._consume(response, into)
            except httpx.HTTPError as e:
                error = ErrorFactory.from_exception(e)
                self._logger.warning(
                    "Request failed",
                    method=request.method,
                    url=request.url,
                    **error_fields(error),
                )
                raise error from e

    def _consume(
        self,
        response: httpx.Response,
        into: type[ModelT] | ByteSink | None,
    ) -> ApiResponse[Any]:
        if isinstance(into, ByteSink):
            for chunk in response.iter_bytes():
                into.write(chunk)
            return ApiResponse(response.status_code, response.headers)

        content = response.read()
        data = None
        if into is not None:
            data = decode_body(content, into, status_code=response.status_code)
        return ApiResponse(response.status_code, response.headers, content, data)
