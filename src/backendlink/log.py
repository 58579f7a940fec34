# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for BackendLink."""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = os.getenv("BACKENDLINK_LOG_LEVEL", "WARNING").upper()

# Connection-level chatter from the httpx stack; only shown when tracing at DEBUG.
_TRANSPORT_LOGGERS = ("httpx", "httpcore")


def resolve_level(level: str | None = None) -> int:
    """Translate a level name into a logging constant, defaulting to WARNING."""
    effective_level = (level or DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, effective_level, logging.WARNING)


def setup_logging(level: str | None = None) -> None:
    """Configure standard logging for CLI/library use."""
    numeric_level = resolve_level(level)
    logging.basicConfig(
        level=numeric_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("backendlink").setLevel(numeric_level)
    transport_level = numeric_level if numeric_level <= logging.DEBUG else max(numeric_level, logging.WARNING)
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)


__all__ = ["resolve_level", "setup_logging"]
