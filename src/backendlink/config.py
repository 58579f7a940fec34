# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration constants and the immutable client configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

SOCKET_BASE_URL = "http://unix"
UNIX_SOCKET_PROTOCOL = "http+unix://"
HTTP_PROTOCOL = "http://"
HTTPS_PROTOCOL = "https://"
DEFAULT_READ_TIMEOUT_SECONDS = 300
CORRELATION_HEADER = "X-Request-Id"


def _optional_env(name: str) -> str | None:
    value = os.getenv(name)
    return value if value else None


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def optional_path(value: str | None) -> str | None:
    """Treat the empty string as "not provided"."""
    return value if value else None


@dataclass(frozen=True)
class ClientConfig:
    """Everything needed to build a BackendClient."""

    url: str
    relative_url_root: str = ""
    ca_file: str | None = None
    ca_path: str | None = None
    self_signed_cert: bool = False
    read_timeout_seconds: int = 0
    client_cert_path: str | None = None
    client_key_path: str | None = None

    def __post_init__(self) -> None:
        if self.read_timeout_seconds < 0:
            raise ValueError(f"read_timeout_seconds must be >= 0, got {self.read_timeout_seconds}")

    @property
    def has_cert_and_key(self) -> bool:
        # A partial pair counts as no client certificate at all.
        return self.client_cert_path is not None and self.client_key_path is not None

    def with_client_cert(self, cert_path: str, key_path: str) -> ClientConfig:
        """Return a copy that presents the given certificate and key over mutual TLS."""
        return replace(self, client_cert_path=cert_path, client_key_path=key_path)

    @classmethod
    def from_env(cls, url: str | None = None) -> ClientConfig:
        """Create a config from environment variables (evaluated at call time)."""
        read_timeout = _int_env("BACKENDLINK_READ_TIMEOUT", 0)
        if read_timeout < 0:
            read_timeout = 0
        return cls(
            url=url if url is not None else os.getenv("BACKENDLINK_URL", ""),
            relative_url_root=os.getenv("BACKENDLINK_RELATIVE_URL_ROOT", ""),
            ca_file=_optional_env("BACKENDLINK_CA_FILE"),
            ca_path=_optional_env("BACKENDLINK_CA_PATH"),
            self_signed_cert=_bool_env("BACKENDLINK_SELF_SIGNED_CERT", False),
            read_timeout_seconds=read_timeout,
            client_cert_path=_optional_env("BACKENDLINK_CLIENT_CERT"),
            client_key_path=_optional_env("BACKENDLINK_CLIENT_KEY"),
        )


def load_client_config(url: str | None = None) -> ClientConfig:
    """Load a ClientConfig from the environment."""
    return ClientConfig.from_env(url)


def resolve_read_timeout(timeout_seconds: int) -> float:
    """Return the effective timeout in seconds; 0 selects the default."""
    if timeout_seconds == 0:
        timeout_seconds = DEFAULT_READ_TIMEOUT_SECONDS
    return float(timeout_seconds)
