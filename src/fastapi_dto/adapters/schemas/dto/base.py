# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""
Framework DTO (Adapters Layer)

Purpose:
    ``Dto`` extends the transport-agnostic ``BaseDTO`` with entry points that
    build instances from FastAPI/Starlette requests, SQLAlchemy records,
    collections and arbitrary objects.

Construction dispatch:
    Every entry point normalizes its input first, then composes flags
    (process defaults | class defaults | call-site | forced) and finally
    calls ``BaseDTO.make`` exactly once per DTO produced. Errors raised by
    the normalizer or the engine propagate unchanged.

Layer: adapters/schemas/dto
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Self

from starlette.requests import Request

from fastapi_dto.adapters.dependencies.container import ContainerListener
from fastapi_dto.adapters.dependencies.dto import dto_dependency
from fastapi_dto.adapters.mappers.source_normalizer import (
    NormalizedSource,
    normalize_collection,
    normalize_model,
    normalize_request,
    normalize_source,
)
from fastapi_dto.application.schemas.dto.base import BaseDTO
from fastapi_dto.application.services.listener import Listener
from fastapi_dto.config.settings import get_settings
from fastapi_dto.domain.flags import NONE, DtoFlag, compose_flags
from fastapi_dto.domain.interfaces.sources import RequestSource
from fastapi_dto.infrastructure.http.request_context import get_current_request
from fastapi_dto.infrastructure.logging.logger import get_json_logger
from fastapi_dto.infrastructure.observability.metrics import record_dto_construction

logger = get_json_logger(__name__)


class Dto(BaseDTO):
    """Base class for DTOs built from framework sources.

    Attributes:
        default_flags: Per-class baseline flags, merged with ``DTO_FLAGS``.
    """

    @classmethod
    async def from_request(
        cls, request: Request | RequestSource | None = None, flags: int = NONE
    ) -> Self:
        """Build a DTO from the given request, or the current one.

        Args:
            request: Request to read. When omitted, the request bound to the
                ambient request context is used.
            flags: Call-site flags. ``PARTIAL | IGNORE_UNKNOWN_PROPERTIES`` is
                always added.

        Returns:
            The hydrated DTO.

        Raises:
            RequestContextError: No request was given and none is bound.
        """
        if request is None:
            request = get_current_request()
        return cls._build(await normalize_request(request), flags)

    @classmethod
    def from_model(cls, record: Any, flags: int = NONE) -> Self:
        """Build a DTO from a SQLAlchemy record.

        ``PARTIAL | IGNORE_UNKNOWN_PROPERTIES | CAST_PRIMITIVES`` is always added.
        Expired columns of a record still attached to its session are reloaded.
        """
        return cls._build(normalize_model(record), flags)

    @classmethod
    def from_collection(cls, items: Any, flags: int = NONE) -> list[Self] | dict[Any, Self]:
        """Build one DTO per item, preserving order (and keys for mappings).

        Records are built as with :meth:`from_model`, anything else as with
        :meth:`from_source`.
        """
        normalized = normalize_collection(items)
        if isinstance(normalized, dict):
            return {key: cls._build(item, flags) for key, item in normalized.items()}
        return [cls._build(item, flags) for item in normalized]

    @classmethod
    def from_source(cls, source: Any, flags: int = NONE) -> Self:
        """Build a DTO from any source shape; no flags are forced."""
        return cls._build(normalize_source(source), flags)

    @classmethod
    def _build(cls, source: NormalizedSource, flags: int) -> Self:
        effective = compose_flags(flags, source.forced_flags)
        logger.debug(
            "dto.construct",
            extra={
                "extra": {
                    "dto": cls.__name__,
                    "source": source.kind,
                    "flags": int(effective),
                    "keys": len(source.data),
                }
            },
        )
        dto = cls.make(source.data, effective)
        record_dto_construction(cls.__name__, source.kind)
        return dto

    @classmethod
    def get_default_flags(cls) -> DtoFlag:
        """Merge the ``dto.flags`` setting with the class defaults."""
        return compose_flags(get_settings().dto_flags, cls.default_flags)

    @classmethod
    def get_listener(cls) -> Listener:
        """Return the container-aware listener registry."""
        return ContainerListener.instance()

    @classmethod
    def dependency(cls, flags: int = NONE) -> Callable[[Request], Awaitable[Self]]:
        """Return a FastAPI dependency that builds this DTO from the route request.

        Example:
            async def create(data: UserData = Depends(UserData.dependency())): ...
        """
        return dto_dependency(cls, flags)
