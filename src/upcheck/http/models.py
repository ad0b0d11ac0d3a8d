# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport-level response model."""

from __future__ import annotations

from dataclasses import dataclass, field

Headers = dict[str, str]


@dataclass(frozen=True)
class TransportResponse:
    """One completed HTTP exchange, whatever its status code."""

    status_code: int
    body: str | None = None
    headers: Headers = field(default_factory=dict)
    elapsed_ms: int = 0
    body_truncated: bool = False
