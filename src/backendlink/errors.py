# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl
from enum import Enum

import httpx


class BackendLinkError(Exception):
    """Base class for client construction failures."""


class UnsupportedURLSchemeError(BackendLinkError, ValueError):
    def __init__(self, url: str):
        self.url = url
        super().__init__(f"unsupported URL scheme: {url!r}")


class ClientCertificateError(BackendLinkError):
    """The client certificate/key pair could not be loaded."""

    def __init__(self, cert_path: str, key_path: str, reason: str):
        self.cert_path = cert_path
        self.key_path = key_path
        super().__init__(f"failed to load client certificate {cert_path!r} with key {key_path!r}: {reason}")


class ErrorCategory(str, Enum):
    UNSUPPORTED_SCHEME = "UNSUPPORTED_SCHEME"
    CLIENT_CERTIFICATE = "CLIENT_CERTIFICATE"
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


def _exception_chain(exc: BaseException) -> list[BaseException]:
    chain: list[BaseException] = []
    current: BaseException | None = exc
    while current is not None and current not in chain:
        chain.append(current)
        current = current.__cause__ or current.__context__
    return chain


def categorize_exception(exc: Exception) -> ErrorCategory:
    """
    Map construction errors and httpx transport exceptions to ErrorCategory.
    """
    if isinstance(exc, UnsupportedURLSchemeError):
        return ErrorCategory.UNSUPPORTED_SCHEME

    if isinstance(exc, ClientCertificateError):
        return ErrorCategory.CLIENT_CERTIFICATE

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    # httpx wraps TLS failures in ConnectError; the SSLError sits further down the chain.
    if any(isinstance(item, ssl.SSLError) for item in _exception_chain(exc)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, ConnectionError):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.UNSUPPORTED_SCHEME: "Backend URL scheme is not supported",
        ErrorCategory.CLIENT_CERTIFICATE: "Client certificate could not be loaded",
        ErrorCategory.TIMEOUT: "Backend did not respond in time",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Backend connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNKNOWN_ERROR: "Unexpected backend error",
        None: "",
    }
    return mapping.get(category, "Unexpected backend error")
