# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Ambient request context.

Summary:
    A task-local slot holding the request currently being served. It is the
    one documented side channel the DTO layer reads: ``Dto.from_request()``
    called without an argument resolves its request here.

Contract:
    • Written by ``CurrentRequestMiddleware`` (or tests via ``set_current_request``)
    • Read by ``get_current_request``; raises when nothing is bound
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import Any

from fastapi_dto.domain.exceptions.dto import RequestContextError

__all__ = ["get_current_request", "reset_current_request", "set_current_request"]

_CURRENT_REQUEST_CTX: ContextVar[Any | None] = ContextVar(
    "fastapi_dto_current_request", default=None
)


def set_current_request(request: Any) -> Token[Any | None]:
    """Bind ``request`` to the current context.

    Args:
        request: Starlette request or any ``RequestSource``.

    Returns:
        Token to pass to :func:`reset_current_request`.
    """
    return _CURRENT_REQUEST_CTX.set(request)


def reset_current_request(token: Token[Any | None]) -> None:
    """Restore the binding that was active before ``token`` was issued."""
    _CURRENT_REQUEST_CTX.reset(token)


def get_current_request() -> Any:
    """Return the request bound to the current context.

    Raises:
        RequestContextError: If no request is bound.
    """
    request = _CURRENT_REQUEST_CTX.get(None)
    if request is None:
        raise RequestContextError(
            "No current request is bound; install CurrentRequestMiddleware "
            "or pass the request explicitly."
        )
    return request
