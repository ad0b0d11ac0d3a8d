# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Upcheck package entrypoint.

Upcheck monitors third-party HTTP endpoints: it probes each configured target, classifies
the outcome into a health status and error category, and applies response caching,
retry-with-backoff and per-target circuit breaking. HTTP behavior is abstracted behind an
injectable Transport, and domain objects are modeled with typed dataclasses.
"""

from .config import HttpSettings, MonitorSettings, load_http_settings, load_monitor_settings
from .errors import NotFoundError, TransportFailure, UpcheckError, ValidationError
from .http import HttpxTransport, StubTransport, Transport, TransportResponse, create_default_transport
from .log import setup_logging
from .models import (
    ErrorCategory,
    HealthCheckResult,
    HealthStatus,
    HealthSummary,
    HttpMethod,
    Target,
    TargetConfig,
    TargetUpdate,
)
from .probe import ProbeEngine
from .runtime import Upcheck
from .version import __version__

__all__ = [
    "ErrorCategory",
    "HealthCheckResult",
    "HealthStatus",
    "HealthSummary",
    "HttpMethod",
    "HttpSettings",
    "HttpxTransport",
    "MonitorSettings",
    "NotFoundError",
    "ProbeEngine",
    "StubTransport",
    "Target",
    "TargetConfig",
    "TargetUpdate",
    "Transport",
    "TransportFailure",
    "TransportResponse",
    "Upcheck",
    "UpcheckError",
    "ValidationError",
    "create_default_transport",
    "load_http_settings",
    "load_monitor_settings",
    "setup_logging",
    "__version__",
]
