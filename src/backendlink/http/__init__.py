# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP transport and client exports."""

from .client import AsyncBackendClient, BackendClient, join_url
from .instrumentation import (
    AsyncCorrelationTransport,
    AsyncTracingTransport,
    CorrelationTransport,
    TracingTransport,
    instrument,
    instrument_async,
)
from .tls import TrustStoreReport, build_ssl_context
from .transports import TransportPlan, select_transport, socket_host

__all__ = [
    "AsyncBackendClient",
    "AsyncCorrelationTransport",
    "AsyncTracingTransport",
    "BackendClient",
    "CorrelationTransport",
    "TracingTransport",
    "TransportPlan",
    "TrustStoreReport",
    "build_ssl_context",
    "instrument",
    "instrument_async",
    "join_url",
    "select_transport",
    "socket_host",
]
