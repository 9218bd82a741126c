# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""FastAPI dependency factory for DTOs.

Summary:
    Lets route handlers receive a hydrated DTO the same way they receive any
    other injected dependency:

        @router.post("/users")
        async def create_user(data: UserData = Depends(dto_dependency(UserData))):
            ...

Layer: adapters/dependencies
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

from starlette.requests import Request

from fastapi_dto.domain.flags import NONE

if TYPE_CHECKING:
    from fastapi_dto.adapters.schemas.dto.base import Dto

DtoT = TypeVar("DtoT", bound="Dto")


def dto_dependency(dto_cls: type[DtoT], flags: int = NONE) -> Callable[[Request], Awaitable[DtoT]]:
    """Return an async dependency building ``dto_cls`` from the route request.

    Args:
        dto_cls: DTO class to build.
        flags: Call-site flags passed to ``from_request``.

    Returns:
        A coroutine function FastAPI can resolve with ``Depends``.
    """

    async def _resolve_dto(request: Request) -> DtoT:
        return await dto_cls.from_request(request, flags)

    _resolve_dto.__name__ = f"resolve_{dto_cls.__name__}"
    return _resolve_dto
