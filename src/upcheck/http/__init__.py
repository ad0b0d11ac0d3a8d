# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP transport exports."""

from .adapters import StubTransport
from .client import Transport, create_default_transport
from .headers import build_request_headers, normalize_headers
from .httpx_transport import HttpxTransport
from .models import Headers, TransportResponse

__all__ = [
    "Headers",
    "HttpxTransport",
    "StubTransport",
    "Transport",
    "TransportResponse",
    "build_request_headers",
    "create_default_transport",
    "normalize_headers",
]
