# src/fastapi_dto/dependencies/core/bootstrap.py
# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""FastAPI wiring for DTO support.

The single public surface is :func:`install_dto_support`, which binds the
current request for each call and registers the DTO error envelopes.

Typical usage:
    app = install_dto_support(FastAPI())
"""

from __future__ import annotations

from fastapi import FastAPI

from fastapi_dto.config.settings import get_settings
from fastapi_dto.infrastructure.http.errors import install_exception_handlers
from fastapi_dto.infrastructure.logging.logger import get_json_logger
from fastapi_dto.infrastructure.middleware.current_request import CurrentRequestMiddleware

logger = get_json_logger(__name__)


def install_dto_support(app: FastAPI) -> FastAPI:
    """Install the current-request middleware and DTO exception handlers.

    Args:
        app: FastAPI application instance.

    Returns:
        The same application, for chaining.
    """
    settings = get_settings()
    app.add_middleware(CurrentRequestMiddleware)
    install_exception_handlers(app)
    logger.info(
        "dto.support_installed",
        extra={"extra": {"dto_flags": settings.dto_flags}},
    )
    return app
