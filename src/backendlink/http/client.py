# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Client handles bound to a resolved backend host."""

from __future__ import annotations

import ssl
from typing import Any

import httpx

from .tls import TrustStoreReport
from .transports import TransportPlan


def join_url(host: str, path: str) -> str:
    """Join ``host`` and ``path`` with exactly one slash between them."""
    if not path:
        return host
    if path.startswith(("http://", "https://")):
        return path
    return f"{host.rstrip('/')}/{path.lstrip('/')}"


class _BackendClientBase:
    def __init__(self, plan: TransportPlan, timeout: float):
        self.host = plan.host
        self.timeout = timeout
        self.transport_kind = plan.kind
        self.socket_path: str | None = plan.socket_path
        self.ssl_context: ssl.SSLContext | None = plan.ssl_context
        self.trust: TrustStoreReport | None = plan.trust

    def url_for(self, path: str) -> str:
        return join_url(self.host, path)

    def describe(self) -> dict[str, Any]:
        """Summarize the client configuration without touching the network."""
        return {
            "host": self.host,
            "transport": self.transport_kind,
            "timeout": self.timeout,
            "socket_path": self.socket_path,
            "tls": self.ssl_context is not None,
            "verify": self.ssl_context.verify_mode != ssl.CERT_NONE if self.ssl_context is not None else None,
            "trust": self.trust.to_dict() if self.trust is not None else None,
        }

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.transport_kind} host={self.host!r} timeout={self.timeout}>"


class BackendClient(_BackendClientBase):
    """Synchronous client; ``http`` is the underlying httpx.Client."""

    def __init__(self, http: httpx.Client, plan: TransportPlan, timeout: float):
        super().__init__(plan, timeout)
        self.http = http

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        return self.http.request(method, self.url_for(path), **kwargs)

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", path, **kwargs)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> BackendClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()


class AsyncBackendClient(_BackendClientBase):
    """Asynchronous client; cancelling the awaiting task aborts the dial."""

    def __init__(self, http: httpx.AsyncClient, plan: TransportPlan, timeout: float):
        super().__init__(plan, timeout)
        self.http = http

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        return await self.http.request(method, self.url_for(path), **kwargs)

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", path, **kwargs)

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> AsyncBackendClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()


__all__ = ["AsyncBackendClient", "BackendClient", "join_url"]
