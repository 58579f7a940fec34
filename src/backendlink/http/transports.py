# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-scheme transport builders."""

from __future__ import annotations

import ssl
from dataclasses import dataclass

import httpx

from ..config import (
    HTTP_PROTOCOL,
    HTTPS_PROTOCOL,
    SOCKET_BASE_URL,
    UNIX_SOCKET_PROTOCOL,
    ClientConfig,
)
from ..errors import UnsupportedURLSchemeError
from .tls import TrustStoreReport, build_ssl_context

AnyTransport = httpx.BaseTransport | httpx.AsyncBaseTransport


@dataclass
class TransportPlan:
    """A raw transport together with the host callers should address."""

    kind: str
    host: str
    transport: AnyTransport
    ssl_context: ssl.SSLContext | None = None
    trust: TrustStoreReport | None = None
    socket_path: str | None = None


def _transport_class(asynchronous: bool) -> type:
    return httpx.AsyncHTTPTransport if asynchronous else httpx.HTTPTransport


def socket_host(relative_url_root: str) -> str:
    """
    Synthesize the host for socket transports.

    Example:
      "/gitlab/" -> "http://unix/gitlab"
    """
    root = (relative_url_root or "").strip("/")
    if root:
        return f"{SOCKET_BASE_URL}/{root}"
    return SOCKET_BASE_URL


def build_socket_transport(url: str, relative_url_root: str, *, asynchronous: bool = False) -> TransportPlan:
    # uds= makes every connection dial the socket whatever host the request names.
    socket_path = url[len(UNIX_SOCKET_PROTOCOL):]
    transport = _transport_class(asynchronous)(uds=socket_path)
    return TransportPlan(kind="unix", host=socket_host(relative_url_root), transport=transport, socket_path=socket_path)


def build_http_transport(url: str, *, asynchronous: bool = False) -> TransportPlan:
    return TransportPlan(kind="http", host=url, transport=_transport_class(asynchronous)())


def build_https_transport(config: ClientConfig, *, asynchronous: bool = False) -> TransportPlan:
    context, report = build_ssl_context(config)
    transport = _transport_class(asynchronous)(verify=context)
    return TransportPlan(kind="https", host=config.url, transport=transport, ssl_context=context, trust=report)


def select_transport(config: ClientConfig, *, asynchronous: bool = False) -> TransportPlan:
    """Pick the transport strategy from the URL prefix; unknown prefixes are fatal."""
    url = config.url
    if url.startswith(UNIX_SOCKET_PROTOCOL):
        return build_socket_transport(url, config.relative_url_root, asynchronous=asynchronous)
    if url.startswith(HTTP_PROTOCOL):
        return build_http_transport(url, asynchronous=asynchronous)
    if url.startswith(HTTPS_PROTOCOL):
        return build_https_transport(config, asynchronous=asynchronous)
    raise UnsupportedURLSchemeError(url)


__all__ = [
    "TransportPlan",
    "build_http_transport",
    "build_https_transport",
    "build_socket_transport",
    "select_transport",
    "socket_host",
]
