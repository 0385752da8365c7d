"""Logging and tracing for the Sbanken SDK.

Log records are structlog events carrying the service name and, where
known, the client id. Spans go through the OpenTelemetry API and stay
no-ops until the application installs an SDK. A failing span is tagged
with the SDK error code and HTTP status of the :class:`SbankenError`
that ended it.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from .errors import SbankenError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .config import TelemetryConfig

SERVICE_NAME = "sbanken-sdk"

_tracer: trace.Tracer | None = None
_logger: structlog.BoundLogger | None = None


def get_tracer() -> trace.Tracer:
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(SERVICE_NAME)
    return _tracer


def get_logger(**context: Any) -> structlog.BoundLogger:
    """Get the SDK logger, bound to ``context`` when given.

    Example::

        log = get_logger(client_id=credentials.client_id)
    """
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(SERVICE_NAME).bind(service_name=SERVICE_NAME)
    return _logger.bind(**context) if context else _logger


def configure_telemetry(config: TelemetryConfig) -> None:
    """Install JSON logging and the named tracer.

    The SDK never calls this itself; applications call it once at startup.
    Unknown level names fall back to INFO.
    """
    global _tracer, _logger

    if not config.enabled:
        _tracer = trace.NoOpTracer()
        return

    level = logging.getLevelNamesMapping().get(config.log_level.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _tracer = trace.get_tracer(config.service_name)
    _logger = structlog.get_logger(config.service_name).bind(
        service_name=config.service_name
    )


def error_fields(error: BaseException) -> dict[str, Any]:
    """Log fields describing ``error``; unset SDK error attributes are left out."""
    if not isinstance(error, SbankenError):
        return {"error": str(error), "error_type": type(error).__name__}
    fields = {
        "error": error.message,
        "error_code": error.code,
        "status_code": error.status_code,
        "correlation_id": error.correlation_id,
    }
    return {key: value for key, value in fields.items() if value is not None}


@contextmanager
def trace_operation(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
) -> Iterator[trace.Span]:
    """Run the block inside a span named ``name``.

    Exceptions are recorded on the span and re-raised. SDK errors also set
    ``sbanken.error_code``, ``http.status_code`` and
    ``sbanken.correlation_id`` when present.
    """
    with get_tracer().start_as_current_span(
        name,
        attributes=attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except SbankenError as e:
            span.set_attribute("sbanken.error_code", e.code)
            if e.status_code is not None:
                span.set_attribute("http.status_code", e.status_code)
            if e.correlation_id:
                span.set_attribute("sbanken.correlation_id", e.correlation_id)
            span.set_status(Status(StatusCode.ERROR, f"{e.code}: {e.message}"))
            span.record_exception(e)
            raise
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, type(e).__name__))
            span.record_exception(e)
            raise
