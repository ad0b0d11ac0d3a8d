# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport abstraction and factory."""

from typing import Protocol

from ..config import HttpSettings, load_http_settings
from ..models.target import Target
from .models import TransportResponse


class Transport(Protocol):
    """
    Performs exactly one HTTP exchange for a target.

    Implementations return a TransportResponse for any status code and raise a
    ``TransportFailure`` variant when no response was obtained.
    """

    def execute(self, target: Target) -> TransportResponse: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


def create_default_transport(settings: HttpSettings | None = None) -> Transport:
    """Factory for the default httpx-backed transport."""
    from .httpx_transport import HttpxTransport

    return HttpxTransport(settings or load_http_settings())
