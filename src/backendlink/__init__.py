# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
BackendLink package entrypoint.

BackendLink builds httpx clients for a backend reachable over a Unix domain
socket, plain HTTP or HTTPS (with custom CA trust and optional mutual TLS).
It only assembles transports; issuing requests is left to the returned
client handle.
"""

from .config import (
    DEFAULT_READ_TIMEOUT_SECONDS,
    ClientConfig,
    load_client_config,
)
from .errors import (
    BackendLinkError,
    ClientCertificateError,
    ErrorCategory,
    UnsupportedURLSchemeError,
    categorize_exception,
)
from .factory import build_async_client, build_client, new_http_client
from .http import AsyncBackendClient, BackendClient, TrustStoreReport
from .log import setup_logging
from .utils.context import correlation_context, get_correlation_id
from .version import __version__

__all__ = [
    "AsyncBackendClient",
    "BackendClient",
    "BackendLinkError",
    "ClientCertificateError",
    "ClientConfig",
    "DEFAULT_READ_TIMEOUT_SECONDS",
    "ErrorCategory",
    "TrustStoreReport",
    "UnsupportedURLSchemeError",
    "build_async_client",
    "build_client",
    "categorize_exception",
    "correlation_context",
    "get_correlation_id",
    "load_client_config",
    "new_http_client",
    "setup_logging",
    "__version__",
]
