# src/fastapi_dto/infrastructure/http/errors.py
# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""HTTP error envelopes for DTO failures.

Maps library exceptions to JSON responses:

    HydrationError       → 422 {"error": {"code": "DTO_...", ...}}
    RequestContextError  → 500 {"error": {"code": "REQUEST_CONTEXT_MISSING", ...}}
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.responses import Response

from fastapi_dto.domain.exceptions.dto import HydrationError, RequestContextError
from fastapi_dto.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


def _trace_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def error_envelope(
    *,
    code: str,
    http_status: int,
    message: str,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    err: dict[str, Any] = {
        "code": code,
        "http_status": http_status,
        "message": message,
    }
    if details:
        err["details"] = jsonable_encoder(details)
    if trace_id is not None:
        err["trace_id"] = trace_id
    return {"error": err}


async def handle_hydration_error(request: Request, exc: HydrationError) -> Response:
    payload = error_envelope(
        code=exc.code,
        http_status=422,
        message=str(exc),
        details=exc.details,
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=422, content=payload)


async def handle_request_context_error(request: Request, exc: RequestContextError) -> Response:
    logger.error("dto.request_context_missing", extra={"extra": {"path": request.url.path}})
    payload = error_envelope(
        code=exc.code,
        http_status=500,
        message=str(exc),
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=500, content=payload)


def install_exception_handlers(app: FastAPI) -> None:
    """Register the DTO exception handlers on ``app``."""
    app.add_exception_handler(HydrationError, handle_hydration_error)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestContextError, handle_request_context_error  # type: ignore[arg-type]
    )
