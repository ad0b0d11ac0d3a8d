# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe execution: classification, retries, circuit breaking and caching."""

from .cache import ResultCache
from .circuit import CircuitBreaker, CircuitBreakerRegistry
from .classifier import Classification, classify_failure, classify_response, is_retryable
from .engine import ProbeEngine
from .retry import RetryController

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerRegistry",
    "Classification",
    "ProbeEngine",
    "ResultCache",
    "RetryController",
    "classify_failure",
    "classify_response",
    "is_retryable",
]
