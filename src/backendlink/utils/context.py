# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Per-request ambient context.

A ContextVar carries the correlation id so the correlation transport can
propagate it without callers threading it through every request call.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_current_correlation_id: ContextVar[str | None] = ContextVar("backendlink_correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Return the correlation id active in the current context, if any."""
    return _current_correlation_id.get()


@contextmanager
def correlation_context(correlation_id: str | None) -> Iterator[None]:
    """Temporarily set the correlation id for requests issued in this context."""
    token = _current_correlation_id.set(correlation_id or None)
    try:
        yield
    finally:
        _current_correlation_id.reset(token)


__all__ = ["correlation_context", "get_correlation_id"]
