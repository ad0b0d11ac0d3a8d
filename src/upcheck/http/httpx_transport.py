# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed Transport implementation."""

from __future__ import annotations

import logging
import time

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import categorize_exception
from ..models.target import HttpMethod, Target
from .client import Transport
from .headers import build_request_headers, normalize_headers
from .models import TransportResponse

logger = logging.getLogger(__name__)

_BODYLESS_METHODS = {HttpMethod.GET, HttpMethod.HEAD}


class HttpxTransport(Transport):
    """Synchronous httpx client wrapper issuing one request per ``execute`` call."""

    def __init__(self, settings: HttpSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_http_settings()
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            verify=self.settings.verify_ssl,
        )

    def execute(self, target: Target) -> TransportResponse:
        headers = build_request_headers(
            target.headers,
            content_type=target.content_type,
            user_agent=self.settings.user_agent,
        )
        content = None
        if target.method not in _BODYLESS_METHODS and target.request_body is not None:
            content = target.request_body.encode("utf-8")

        max_body_bytes = self.settings.max_body_bytes
        if max_body_bytes <= 0:
            max_body_bytes = 16 * 1024 * 1024

        start = time.monotonic()
        try:
            with self._client.stream(
                target.method.value,
                target.url,
                headers=headers,
                content=content,
                timeout=target.timeout,
            ) as resp:
                body = bytearray()
                truncated = False
                for chunk in resp.iter_bytes():
                    if not chunk:
                        continue
                    remaining = max_body_bytes - len(body)
                    if len(chunk) > remaining:
                        body.extend(chunk[:remaining])
                        truncated = True
                        break
                    body.extend(chunk)

                encoding = resp.encoding or "utf-8"
                try:
                    text = bytes(body).decode(encoding, errors="replace")
                except LookupError:
                    text = bytes(body).decode("utf-8", errors="replace")
                status_code = resp.status_code
                response_headers = normalize_headers(resp.headers)
        except Exception as exc:  # noqa: BLE001
            failure = categorize_exception(exc)
            logger.debug("%s %s failed: %s (%s)", target.method.value, target.url, failure.kind.value, exc)
            raise failure from exc

        elapsed_ms = int((time.monotonic() - start) * 1000)
        return TransportResponse(
            status_code=status_code,
            body=text,
            headers=response_headers,
            elapsed_ms=elapsed_ms,
            body_truncated=truncated,
        )

    def close(self) -> None:
        self._client.close()
