# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for Upcheck."""

from .result import ErrorCategory, HealthCheckResult, HealthStatus, HealthSummary
from .target import DEFAULT_CONTENT_TYPE, HttpMethod, Target, TargetConfig, TargetUpdate

__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "ErrorCategory",
    "HealthCheckResult",
    "HealthStatus",
    "HealthSummary",
    "HttpMethod",
    "Target",
    "TargetConfig",
    "TargetUpdate",
]
