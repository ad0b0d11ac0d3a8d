# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Management API.

All routes are mounted under ``/api``. Probing blocks on network I/O, so check routes
run in Starlette's threadpool.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route, Router

from ..errors import NotFoundError, ValidationError
from ..runtime import Upcheck

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _get_upcheck(request: Request) -> Upcheck:
    upcheck: Upcheck | None = getattr(request.app.state, "upcheck", None)
    if upcheck is None:
        raise RuntimeError("Upcheck not found on app.state")
    return upcheck


def _error_json(error: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": error, "message": message}, status_code=status_code)


def _not_found(exc: NotFoundError) -> JSONResponse:
    return _error_json("not_found", str(exc), 404)


async def _json_body(request: Request) -> dict[str, Any]:
    try:
        payload = await request.json()
    except ValueError:
        raise ValidationError("body", "request body must be valid JSON") from None
    if not isinstance(payload, dict):
        raise ValidationError("body", "request body must be a JSON object")
    return payload


# ── Targets ──────────────────────────────────────────────────────────────


async def handle_create_target(request: Request) -> JSONResponse:
    upcheck = _get_upcheck(request)
    try:
        target = upcheck.create_target(await _json_body(request))
    except ValidationError as exc:
        return _error_json("validation_error", str(exc), 400)
    return JSONResponse(target.to_dict(), status_code=201)


async def handle_list_targets(request: Request) -> JSONResponse:
    upcheck = _get_upcheck(request)
    return JSONResponse([target.to_dict() for target in upcheck.list_targets()])


async def handle_get_target(request: Request) -> JSONResponse:
    upcheck = _get_upcheck(request)
    try:
        target = upcheck.get_target(request.path_params["target_id"])
    except NotFoundError as exc:
        return _not_found(exc)
    return JSONResponse(target.to_dict())


async def handle_update_target(request: Request) -> JSONResponse:
    upcheck = _get_upcheck(request)
    try:
        target = upcheck.update_target(request.path_params["target_id"], await _json_body(request))
    except NotFoundError as exc:
        return _not_found(exc)
    except ValidationError as exc:
        return _error_json("validation_error", str(exc), 400)
    return JSONResponse(target.to_dict())


async def handle_delete_target(request: Request) -> Response:
    upcheck = _get_upcheck(request)
    if upcheck.delete_target(request.path_params["target_id"]):
        return Response(status_code=204)
    return _error_json("not_found", f"target not found: {request.path_params['target_id']}", 404)


async def handle_check_target(request: Request) -> JSONResponse:
    upcheck = _get_upcheck(request)
    force = request.query_params.get("force", "false").strip().lower() in _TRUE_VALUES
    try:
        result = await run_in_threadpool(upcheck.check_target, request.path_params["target_id"], force)
    except NotFoundError as exc:
        return _not_found(exc)
    return JSONResponse(result.to_dict())


# ── Health ───────────────────────────────────────────────────────────────


async def handle_results(request: Request) -> JSONResponse:
    upcheck = _get_upcheck(request)
    results = upcheck.get_last_results()
    return JSONResponse({target_id: result.to_dict() for target_id, result in results.items()})


async def handle_summary(request: Request) -> JSONResponse:
    upcheck = _get_upcheck(request)
    return JSONResponse(upcheck.get_summary().to_dict())


# ── Router ───────────────────────────────────────────────────────────────

api_routes = Router(
    routes=[
        Route("/targets", endpoint=handle_create_target, methods=["POST"]),
        Route("/targets", endpoint=handle_list_targets, methods=["GET"]),
        Route("/targets/{target_id}", endpoint=handle_get_target, methods=["GET"]),
        Route("/targets/{target_id}", endpoint=handle_update_target, methods=["PUT"]),
        Route("/targets/{target_id}", endpoint=handle_delete_target, methods=["DELETE"]),
        Route("/targets/{target_id}/check", endpoint=handle_check_target, methods=["POST"]),
        Route("/health/results", endpoint=handle_results, methods=["GET"]),
        Route("/health/summary", endpoint=handle_summary, methods=["GET"]),
    ]
)


def create_app(upcheck: Upcheck | None = None, *, run_scheduler: bool = True) -> Starlette:
    """Build the Starlette app; the scheduler runs for the lifetime of the app."""
    instance = upcheck or Upcheck()

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        if run_scheduler:
            instance.start_scheduler()
        try:
            yield
        finally:
            instance.stop_scheduler()

    app = Starlette(routes=[Mount("/api", app=api_routes)], lifespan=lifespan)
    app.state.upcheck = instance
    return app


__all__ = ["api_routes", "create_app"]
