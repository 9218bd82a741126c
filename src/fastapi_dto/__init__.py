# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""fastapi-dto: flag-aware data transfer objects for FastAPI and SQLAlchemy.

Typical usage:
    from fastapi_dto import Dto, PARTIAL

    class UserData(Dto):
        name: str
        email: str | None = None

    user = UserData.from_model(orm_user)
    draft = UserData.from_source({"name": "Ada"}, PARTIAL)
"""

from __future__ import annotations

from fastapi_dto.adapters.dependencies.container import ContainerListener
from fastapi_dto.adapters.dependencies.dto import dto_dependency
from fastapi_dto.adapters.schemas.dto.base import Dto
from fastapi_dto.application.schemas.dto.base import BaseDTO
from fastapi_dto.application.services.listener import Listener
from fastapi_dto.dependencies.core.bootstrap import install_dto_support
from fastapi_dto.domain.exceptions import (
    DomainError,
    HydrationError,
    ImmutableDtoError,
    InvalidPropertyValueError,
    ListenerResolutionError,
    MissingPropertiesError,
    RequestContextError,
    UnknownPropertiesError,
)
from fastapi_dto.domain.flags import (
    CAST_PRIMITIVES,
    IGNORE_UNKNOWN_PROPERTIES,
    MUTABLE,
    NONE,
    PARTIAL,
    DtoFlag,
    compose_flags,
    parse_flags,
)
from fastapi_dto.domain.interfaces.sources import (
    Arrayable,
    Enumerable,
    Jsonable,
    JsonSerializable,
    RequestSource,
)

__version__ = "0.1.0"

__all__ = [
    # DTOs
    "BaseDTO",
    "Dto",
    "dto_dependency",
    "install_dto_support",
    # Flags
    "DtoFlag",
    "NONE",
    "IGNORE_UNKNOWN_PROPERTIES",
    "MUTABLE",
    "PARTIAL",
    "CAST_PRIMITIVES",
    "compose_flags",
    "parse_flags",
    # Sources
    "Arrayable",
    "Enumerable",
    "Jsonable",
    "JsonSerializable",
    "RequestSource",
    # Listeners
    "ContainerListener",
    "Listener",
    # Errors
    "DomainError",
    "HydrationError",
    "ImmutableDtoError",
    "InvalidPropertyValueError",
    "ListenerResolutionError",
    "MissingPropertiesError",
    "RequestContextError",
    "UnknownPropertiesError",
]
