# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl
from collections.abc import Iterator
from enum import Enum

import httpx


class UpcheckError(Exception):
    """Base class for errors surfaced to Upcheck callers."""


class NotFoundError(UpcheckError, LookupError):
    """Raised when a target id is not registered."""

    def __init__(self, target_id: object):
        self.target_id = target_id
        super().__init__(f"target not found: {target_id}")


class ValidationError(UpcheckError, ValueError):
    """Raised when a target configuration is malformed; nothing is stored."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class FailureKind(str, Enum):
    TIMEOUT = "TIMEOUT"
    DNS = "DNS"
    TLS = "TLS"
    CONNECTION = "CONNECTION"
    OTHER = "OTHER"


class TransportFailure(UpcheckError):
    """
    A transport exchange that produced no HTTP response.

    Subclasses form a closed set of variants tagged by ``kind``; the classifier switches
    on the tag rather than on exception text.
    """

    kind: FailureKind = FailureKind.OTHER

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(detail)


class TransportTimeout(TransportFailure):
    kind = FailureKind.TIMEOUT


class DnsFailure(TransportFailure):
    kind = FailureKind.DNS


class TlsFailure(TransportFailure):
    kind = FailureKind.TLS


class ConnectionFailure(TransportFailure):
    kind = FailureKind.CONNECTION


class OtherTransportFailure(TransportFailure):
    kind = FailureKind.OTHER

    def __init__(self, error_type: str, detail: str = ""):
        self.error_type = error_type
        super().__init__(detail)

    @classmethod
    def from_exception(cls, exc: BaseException) -> OtherTransportFailure:
        return cls(type(exc).__name__, str(exc))

    def describe(self) -> str:
        return f"{self.error_type}: {self.detail}"


_DNS_HINTS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated with hostname",
)
_TLS_HINTS = ("certificate_verify_failed", "ssl:", "tlsv1", "handshake")


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def categorize_exception(exc: BaseException) -> TransportFailure:
    """
    Map Python/httpx exceptions to a TransportFailure variant.

    httpx wraps socket and ssl errors, so the cause chain is inspected before falling
    back to message hints.
    """
    if isinstance(exc, TransportFailure):
        return exc

    detail = str(exc)
    if isinstance(exc, (httpx.TimeoutException, TimeoutError, socket.timeout)):
        return TransportTimeout(detail or "request timed out")

    chain = list(_exception_chain(exc))
    if any(isinstance(item, (ssl.SSLError, ssl.CertificateError)) for item in chain):
        return TlsFailure(detail)
    if any(isinstance(item, (socket.gaierror, socket.herror)) for item in chain):
        return DnsFailure(detail)

    lowered = " ".join(str(item) for item in chain).lower()
    if isinstance(exc, (httpx.ConnectError, OSError)):
        if any(hint in lowered for hint in _DNS_HINTS):
            return DnsFailure(detail)
        if any(hint in lowered for hint in _TLS_HINTS):
            return TlsFailure(detail)

    if isinstance(
        exc, (httpx.ConnectError, httpx.NetworkError, httpx.RemoteProtocolError, httpx.ProxyError, ConnectionError)
    ):
        return ConnectionFailure(detail)

    return OtherTransportFailure.from_exception(exc)


__all__ = [
    "ConnectionFailure",
    "DnsFailure",
    "FailureKind",
    "NotFoundError",
    "OtherTransportFailure",
    "TlsFailure",
    "TransportFailure",
    "TransportTimeout",
    "UpcheckError",
    "ValidationError",
    "categorize_exception",
]
