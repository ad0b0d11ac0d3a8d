# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Target configuration models and validation."""

from __future__ import annotations

import re
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any

from ..config import parse_duration
from ..errors import ValidationError

DEFAULT_CONTENT_TYPE = "application/json"
_URL_RE = re.compile(r"^https?://.+", re.IGNORECASE)


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"

    @classmethod
    def parse(cls, value: Any) -> HttpMethod:
        if isinstance(value, HttpMethod):
            return value
        try:
            return cls(str(value or "").strip().upper())
        except ValueError:
            raise ValidationError("method", f"unsupported HTTP method: {value!r}") from None


@dataclass(frozen=True)
class Target:
    """
    Snapshot of one monitored endpoint.

    Targets are immutable; the store replaces the whole snapshot on update, so a probe
    always sees a consistent configuration. ``timeout`` and ``slow_threshold`` are seconds.
    """

    id: str
    name: str
    url: str
    method: HttpMethod = HttpMethod.GET
    headers: dict[str, str] = field(default_factory=dict)
    request_body: str | None = None
    content_type: str | None = None
    timeout: float = 3.0
    expected_status_min: int = 200
    expected_status_max: int = 299
    expect_json: bool = False
    expected_body_contains: str | None = None
    slow_threshold: float = 2.0
    max_retries: int = 2

    @property
    def slow_threshold_ms(self) -> int:
        return int(round(self.slow_threshold * 1000))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "method": self.method.value,
            "headers": dict(self.headers),
            "request_body": self.request_body,
            "content_type": self.content_type,
            "timeout": self.timeout,
            "expected_status_min": self.expected_status_min,
            "expected_status_max": self.expected_status_max,
            "expect_json": self.expect_json,
            "expected_body_contains": self.expected_body_contains,
            "slow_threshold": self.slow_threshold,
            "max_retries": self.max_retries,
        }


@dataclass
class TargetConfig:
    """Fields accepted when creating a target."""

    name: str
    url: str
    method: HttpMethod | str = HttpMethod.GET
    headers: Mapping[str, str] | None = None
    request_body: str | None = None
    content_type: str | None = None
    timeout: float | str = 3.0
    expected_status_min: int = 200
    expected_status_max: int = 299
    expect_json: bool = False
    expected_body_contains: str | None = None
    slow_threshold: float | str = 2.0
    max_retries: int = 2

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TargetConfig:
        """Build a config from JSON-like input; unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(str(key) for key in data if key not in known)
        if unknown:
            raise ValidationError(unknown[0], "unknown field")
        for required in ("name", "url"):
            if data.get(required) is None:
                raise ValidationError(required, "is required")
        return cls(**dict(data))

    def build(self, target_id: str | None = None) -> Target:
        """Validate and materialize a Target with a fresh id."""
        content_type = self.content_type
        if content_type is None and self.request_body is not None:
            content_type = DEFAULT_CONTENT_TYPE
        target = Target(
            id=target_id or str(uuid.uuid4()),
            name=self.name,
            url=self.url,
            method=HttpMethod.parse(self.method),
            headers=_coerce_headers(self.headers),
            request_body=self.request_body,
            content_type=content_type,
            timeout=_coerce_duration("timeout", self.timeout),
            expected_status_min=_coerce_int("expected_status_min", self.expected_status_min),
            expected_status_max=_coerce_int("expected_status_max", self.expected_status_max),
            expect_json=_coerce_bool("expect_json", self.expect_json),
            expected_body_contains=self.expected_body_contains,
            slow_threshold=_coerce_duration("slow_threshold", self.slow_threshold),
            max_retries=_coerce_int("max_retries", self.max_retries),
        )
        validate_target(target)
        return target


@dataclass
class TargetUpdate:
    """Partial update; ``None`` means "leave unchanged"."""

    name: str | None = None
    url: str | None = None
    method: HttpMethod | str | None = None
    headers: Mapping[str, str] | None = None
    request_body: str | None = None
    content_type: str | None = None
    timeout: float | str | None = None
    expected_status_min: int | None = None
    expected_status_max: int | None = None
    expect_json: bool | None = None
    expected_body_contains: str | None = None
    slow_threshold: float | str | None = None
    max_retries: int | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TargetUpdate:
        known = {f.name for f in fields(cls)}
        unknown = sorted(str(key) for key in data if key not in known)
        if unknown:
            raise ValidationError(unknown[0], "unknown field")
        return cls(**dict(data))

    def apply(self, target: Target) -> Target:
        """Return a new validated Target with the supplied fields merged in."""
        changes: dict[str, Any] = {}
        if self.name is not None:
            changes["name"] = self.name
        if self.url is not None:
            changes["url"] = self.url
        if self.method is not None:
            changes["method"] = HttpMethod.parse(self.method)
        if self.headers is not None:
            changes["headers"] = _coerce_headers(self.headers)
        if self.request_body is not None:
            changes["request_body"] = self.request_body
            if self.content_type is None and target.content_type is None:
                changes["content_type"] = DEFAULT_CONTENT_TYPE
        if self.content_type is not None:
            changes["content_type"] = self.content_type
        if self.timeout is not None:
            changes["timeout"] = _coerce_duration("timeout", self.timeout)
        if self.expected_status_min is not None:
            changes["expected_status_min"] = _coerce_int("expected_status_min", self.expected_status_min)
        if self.expected_status_max is not None:
            changes["expected_status_max"] = _coerce_int("expected_status_max", self.expected_status_max)
        if self.expect_json is not None:
            changes["expect_json"] = _coerce_bool("expect_json", self.expect_json)
        if self.expected_body_contains is not None:
            changes["expected_body_contains"] = self.expected_body_contains
        if self.slow_threshold is not None:
            changes["slow_threshold"] = _coerce_duration("slow_threshold", self.slow_threshold)
        if self.max_retries is not None:
            changes["max_retries"] = _coerce_int("max_retries", self.max_retries)

        updated = replace(target, **changes)
        validate_target(updated)
        return updated


def validate_target(target: Target) -> None:
    if not isinstance(target.name, str) or not target.name.strip():
        raise ValidationError("name", "must not be blank")
    if not isinstance(target.url, str) or not _URL_RE.match(target.url.strip()):
        raise ValidationError("url", "url must start with http:// or https://")
    if target.timeout <= 0:
        raise ValidationError("timeout", "must be positive")
    if target.slow_threshold <= 0:
        raise ValidationError("slow_threshold", "must be positive")
    if target.expected_status_min < 100:
        raise ValidationError("expected_status_min", "must be >= 100")
    if target.expected_status_max < 100:
        raise ValidationError("expected_status_max", "must be >= 100")
    if target.expected_status_min > target.expected_status_max:
        raise ValidationError("expected_status_min", "must not exceed expected_status_max")
    if target.max_retries < 0:
        raise ValidationError("max_retries", "must be >= 0")
    for name in ("request_body", "content_type", "expected_body_contains"):
        value = getattr(target, name)
        if value is not None and not isinstance(value, str):
            raise ValidationError(name, "must be a string")


def _coerce_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    if headers is None:
        return {}
    if not isinstance(headers, Mapping):
        raise ValidationError("headers", "must be a mapping of header name to value")
    return {str(key): "" if value is None else str(value) for key, value in headers.items()}


def _coerce_duration(name: str, value: Any) -> float:
    try:
        return parse_duration(value)
    except ValueError:
        raise ValidationError(name, f"invalid duration: {value!r}") from None


def _coerce_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError(name, "must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(name, "must be an integer") from None



def _coerce_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(name, "must be a boolean")
    return value

__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "HttpMethod",
    "Target",
    "TargetConfig",
    "TargetUpdate",
    "validate_target",
]
