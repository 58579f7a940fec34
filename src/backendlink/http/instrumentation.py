# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport decorators for request tracing and correlation id propagation."""

from __future__ import annotations

import logging
import time

import httpx
from opentelemetry import propagate, trace
from opentelemetry.trace import Span, SpanKind, Status, StatusCode

from ..config import CORRELATION_HEADER
from ..utils.context import get_correlation_id

logger = logging.getLogger(__name__)


def _apply_correlation_id(request: httpx.Request) -> None:
    correlation_id = get_correlation_id()
    if correlation_id and CORRELATION_HEADER not in request.headers:
        request.headers[CORRELATION_HEADER] = correlation_id


def _begin_span(span: Span, request: httpx.Request) -> None:
    span.set_attribute("http.method", request.method)
    span.set_attribute("http.url", str(request.url))
    # Injected while the client span is current, so the backend joins this trace.
    propagate.inject(request.headers)


def _end_span(span: Span, request: httpx.Request, response: httpx.Response, started: float) -> None:
    span.set_attribute("http.status_code", response.status_code)
    if response.status_code >= 400:
        span.set_status(Status(StatusCode.ERROR, f"HTTP {response.status_code}"))
    logger.debug("%s %s -> %d in %.3fs", request.method, request.url, response.status_code, time.monotonic() - started)


def _fail_span(span: Span, request: httpx.Request, exc: Exception, started: float) -> None:
    span.record_exception(exc)
    span.set_status(Status(StatusCode.ERROR, str(exc)))
    logger.debug("%s %s failed after %.3fs: %s", request.method, request.url, time.monotonic() - started, exc)


class TracingTransport(httpx.BaseTransport):
    """Run every request inside an OpenTelemetry client span and propagate its context."""

    def __init__(self, transport: httpx.BaseTransport, tracer_provider: trace.TracerProvider | None = None):
        self._transport = transport
        self._tracer = trace.get_tracer(__name__, tracer_provider=tracer_provider)

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        with self._tracer.start_as_current_span(
            f"HTTP {request.method}",
            kind=SpanKind.CLIENT,
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            _begin_span(span, request)
            started = time.monotonic()
            try:
                response = self._transport.handle_request(request)
            except Exception as exc:
                _fail_span(span, request, exc, started)
                raise
            _end_span(span, request, response, started)
            return response

    def close(self) -> None:
        self._transport.close()


class CorrelationTransport(httpx.BaseTransport):
    """Attach the ambient correlation id to outgoing requests."""

    def __init__(self, transport: httpx.BaseTransport):
        self._transport = transport

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        _apply_correlation_id(request)
        return self._transport.handle_request(request)

    def close(self) -> None:
        self._transport.close()


class AsyncTracingTransport(httpx.AsyncBaseTransport):
    def __init__(self, transport: httpx.AsyncBaseTransport, tracer_provider: trace.TracerProvider | None = None):
        self._transport = transport
        self._tracer = trace.get_tracer(__name__, tracer_provider=tracer_provider)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        with self._tracer.start_as_current_span(
            f"HTTP {request.method}",
            kind=SpanKind.CLIENT,
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            _begin_span(span, request)
            started = time.monotonic()
            try:
                response = await self._transport.handle_async_request(request)
            except Exception as exc:
                _fail_span(span, request, exc, started)
                raise
            _end_span(span, request, response, started)
            return response

    async def aclose(self) -> None:
        await self._transport.aclose()


class AsyncCorrelationTransport(httpx.AsyncBaseTransport):
    def __init__(self, transport: httpx.AsyncBaseTransport):
        self._transport = transport

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        _apply_correlation_id(request)
        return await self._transport.handle_async_request(request)

    async def aclose(self) -> None:
        await self._transport.aclose()


def instrument(
    transport: httpx.BaseTransport,
    tracer_provider: trace.TracerProvider | None = None,
) -> httpx.BaseTransport:
    """Wrap a transport with tracing and correlation; the global tracer provider is used by default."""
    return CorrelationTransport(TracingTransport(transport, tracer_provider))


def instrument_async(
    transport: httpx.AsyncBaseTransport,
    tracer_provider: trace.TracerProvider | None = None,
) -> httpx.AsyncBaseTransport:
    return AsyncCorrelationTransport(AsyncTracingTransport(transport, tracer_provider))


__all__ = [
    "AsyncCorrelationTransport",
    "AsyncTracingTransport",
    "CorrelationTransport",
    "TracingTransport",
    "instrument",
    "instrument_async",
]
