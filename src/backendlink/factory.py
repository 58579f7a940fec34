# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Build configured backend clients."""

from __future__ import annotations

import logging

import httpx

from .config import ClientConfig, optional_path, resolve_read_timeout
from .errors import BackendLinkError
from .http.client import AsyncBackendClient, BackendClient
from .http.instrumentation import instrument, instrument_async
from .http.transports import select_transport

logger = logging.getLogger(__name__)


def build_client(config: ClientConfig) -> BackendClient:
    """
    Build a BackendClient for ``config``.

    Raises UnsupportedURLSchemeError for an unknown URL prefix and
    ClientCertificateError when the client certificate/key pair cannot be
    loaded. Problems with extra CA files only reduce the trust pool.

    The timeout bounds each phase (connect, read, write, pool acquire)
    separately rather than the whole exchange: a backend that keeps
    trickling bytes can hold a request open past the timeout. Callers that
    need a hard overall deadline should use build_async_client with
    ``asyncio.wait_for``.
    """
    plan = select_transport(config)
    timeout = resolve_read_timeout(config.read_timeout_seconds)
    http = httpx.Client(transport=instrument(plan.transport), timeout=httpx.Timeout(timeout))
    logger.debug("built %s client for %s (timeout %ss)", plan.kind, plan.host, timeout)
    return BackendClient(http, plan, timeout)


def build_async_client(config: ClientConfig) -> AsyncBackendClient:
    """Async variant of build_client with the same transport and TLS rules."""
    plan = select_transport(config, asynchronous=True)
    timeout = resolve_read_timeout(config.read_timeout_seconds)
    http = httpx.AsyncClient(transport=instrument_async(plan.transport), timeout=httpx.Timeout(timeout))
    logger.debug("built async %s client for %s (timeout %ss)", plan.kind, plan.host, timeout)
    return AsyncBackendClient(http, plan, timeout)


def new_http_client(
    url: str,
    relative_url_root: str,
    ca_file: str,
    ca_path: str,
    self_signed_cert: bool,
    read_timeout_seconds: int,
) -> BackendClient | None:
    """
    Deprecated: use build_client with a ClientConfig.

    Empty strings mean "not set". Errors are logged and ``None`` is returned.
    """
    try:
        config = ClientConfig(
            url=url,
            relative_url_root=relative_url_root,
            ca_file=optional_path(ca_file),
            ca_path=optional_path(ca_path),
            self_signed_cert=self_signed_cert,
            read_timeout_seconds=read_timeout_seconds,
        )
        return build_client(config)
    except BackendLinkError as exc:
        logger.error("new http client with opts: %s", exc)
        return None


__all__ = ["build_async_client", "build_client", "new_http_client"]
