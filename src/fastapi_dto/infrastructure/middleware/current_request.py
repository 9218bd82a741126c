# src/fastapi_dto/infrastructure/middleware/current_request.py
# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Current Request Middleware.

Summary:
    Binds each incoming request to the ambient request context for the
    duration of the call, so DTOs can be built from "the current request"
    without threading it through every function.

Contract:
    • Reads:  X-Request-ID (optional)
    • Stores: request context (contextvars), request.state.request_id (str)
    • Writes: X-Request-ID (always written)
    • Enriches logs via contextvars (request_id)

Notes:
    Request bodies are buffered in memory before the endpoint runs.
"""

from __future__ import annotations

import re
import uuid
from typing import Final

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from fastapi_dto.infrastructure.http.request_context import (
    reset_current_request,
    set_current_request,
)
from fastapi_dto.infrastructure.logging.logger import (
    reset_request_context,
    set_request_context,
)

_REQUEST_ID_HEADER: Final[str] = "X-Request-ID"
_SAFE_RE: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9\-_.:@]{1,128}$")


def _coerce_request_id(raw: str | None) -> str:
    """Return a safe request id, preferring caller-provided values.

    Args:
        raw: Incoming request id header value, if any.

    Returns:
        Validated or generated request id string.
    """
    if raw and _SAFE_RE.match(raw):
        return raw
    return str(uuid.uuid4())


class CurrentRequestMiddleware(BaseHTTPMiddleware):
    """Middleware that exposes the request being served to the DTO layer."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Bind the request for downstream code and emit the request id header."""
        req_id = _coerce_request_id(request.headers.get(_REQUEST_ID_HEADER))
        request.state.request_id = req_id
        rid_token = set_request_context(request_id=req_id)
        try:
            # Buffer the body up front: the endpoint may consume the stream first,
            # after which the bound request could no longer read it.
            await request.body()

            token = set_current_request(request)
            try:
                response: Response = await call_next(request)
            finally:
                reset_current_request(token)
        finally:
            reset_request_context(rid_token)

        response.headers.setdefault(_REQUEST_ID_HEADER, req_id)
        return response
