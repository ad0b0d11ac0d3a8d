# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header normalization utilities.

HTTP header field names are case-insensitive (RFC 9110). Results store response headers
as plain lowercase-keyed dicts, and outgoing headers are merged case-insensitively so a
target's own ``Content-Type`` or ``User-Agent`` always wins over defaults.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def _coerce_headers_mapping(headers: Any) -> Mapping[object, object] | None:
    """
    Best-effort coercion of "dict-like" header containers into a Mapping.

    Accepts plain dicts, httpx.Headers (``.multi_items()`` is flattened by ``dict``) and
    iterables of pairs.
    """
    if not headers:
        return None
    if isinstance(headers, Mapping):
        return headers
    try:
        return dict(headers)
    except (TypeError, ValueError):
        return None


def normalize_headers(headers: Any) -> dict[str, str]:
    """Return a lowercase-keyed copy of a header mapping."""
    coerced = _coerce_headers_mapping(headers)
    if not coerced:
        return {}
    out: dict[str, str] = {}
    for key, value in coerced.items():
        if key is None:
            continue
        name = str(key).strip().lower()
        if not name:
            continue
        out[name] = "" if value is None else str(value)
    return out


def has_header(headers: Mapping[str, str], name: str) -> bool:
    lower = name.lower()
    return any(str(key).lower() == lower for key in headers)


def build_request_headers(
    headers: Mapping[str, str] | None,
    *,
    content_type: str | None = None,
    user_agent: str | None = None,
) -> dict[str, str]:
    """Merge a target's headers with Content-Type and User-Agent defaults."""
    merged = dict(headers or {})
    if content_type and not content_type.isspace() and not has_header(merged, "Content-Type"):
        merged["Content-Type"] = content_type
    if user_agent and not has_header(merged, "User-Agent"):
        merged["User-Agent"] = user_agent
    return merged


__all__ = ["build_request_headers", "has_header", "normalize_headers"]
