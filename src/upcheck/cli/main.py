# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Upcheck CLI."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from ..config import HttpSettings, load_http_settings
from ..errors import ValidationError
from ..http import create_default_transport
from ..log import setup_logging
from ..models import ErrorCategory, HealthCheckResult, HealthStatus, TargetConfig
from ..runtime import Upcheck

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Upcheck third-party HTTP endpoint monitor")
    parser.add_argument("--log-level", default=None, help="Logging level (default: $UPCHECK_LOG_LEVEL or WARNING)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Probe a single URL once (with retries) and report its health")
    check.add_argument("url", help="Target URL to probe")
    check.add_argument("--method", default="GET", help="HTTP method (default: GET)")
    check.add_argument("--header", action="append", default=[], metavar="NAME:VALUE", help="Extra request header")
    check.add_argument("--body", default=None, help="Request body")
    check.add_argument("--timeout", default="3s", help="Request timeout, e.g. 3s or 500ms")
    check.add_argument("--slow-threshold", default="2s", help="Latency above which the target is DEGRADED")
    check.add_argument("--max-retries", type=int, default=2, help="Retries on retryable failures")
    check.add_argument("--expect-json", action="store_true", help="Require a JSON response body")
    check.add_argument("--expect-body", default=None, help="Required substring in the response body")
    check.add_argument("--json", action="store_true", help="Output JSON instead of human-friendly summary")
    check.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )

    serve = subparsers.add_parser("serve", help="Run the management API and periodic scheduler")
    serve.add_argument("--host", default=DEFAULT_HOST)
    serve.add_argument("--port", type=int, default=DEFAULT_PORT)
    serve.add_argument("--targets", type=Path, default=None, help="JSON file with a list of target configs to preload")
    return parser


def _parse_headers(values: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise ValidationError("header", f"expected NAME:VALUE, got {raw!r}")
        headers[name.strip()] = value.strip()
    return headers


def load_targets_file(path: Path) -> list[TargetConfig]:
    data: Any = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("targets", [])
    if not isinstance(data, list):
        raise ValidationError("targets", "targets file must contain a list of target objects")
    if not all(isinstance(item, dict) for item in data):
        raise ValidationError("targets", "each target must be a JSON object")
    return [TargetConfig.from_mapping(item) for item in data]


def _pretty_print(result: HealthCheckResult, url: str) -> None:
    print(f"[Upcheck] {url}")
    print(f"Status: {result.status.value}")
    if result.error_category is not ErrorCategory.NONE:
        print(f"Category: {result.error_category.value}")
    if result.error_message:
        print(f"Reason: {result.error_message}")
    if result.http_status is not None:
        print(f"HTTP status: {result.http_status}")
    print(f"Latency: {result.latency_ms} ms")
    print(f"Attempts: {result.attempts}")


def _run_check(args: argparse.Namespace) -> int:
    settings: HttpSettings = load_http_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False

    config = TargetConfig(
        name=args.url,
        url=args.url,
        method=args.method,
        headers=_parse_headers(args.header),
        request_body=args.body,
        timeout=args.timeout,
        slow_threshold=args.slow_threshold,
        max_retries=args.max_retries,
        expect_json=args.expect_json,
        expected_body_contains=args.expect_body,
    )
    with Upcheck(transport=create_default_transport(settings), http_settings=settings) as upcheck:
        target = upcheck.create_target(config)
        result = upcheck.check_target(target.id, force=True)

    if args.json:
        json.dump(result.to_dict(), sys.stdout, indent=2, sort_keys=True)
        sys.stdout.write("\n")
    else:
        _pretty_print(result, args.url)
    return 0 if result.status is HealthStatus.UP else 1


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from ..api import create_app

    upcheck = Upcheck()
    if args.targets is not None:
        for config in load_targets_file(args.targets):
            target = upcheck.create_target(config)
            logger.info("loaded target %s (%s)", target.id, target.url)
    try:
        uvicorn.run(create_app(upcheck), host=args.host, port=args.port)
    finally:
        upcheck.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        if args.command == "check":
            return _run_check(args)
        return _run_serve(args)
    except ValidationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
