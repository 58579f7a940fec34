# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Utility helpers."""

from .context import correlation_context, get_correlation_id

__all__ = ["correlation_context", "get_correlation_id"]
