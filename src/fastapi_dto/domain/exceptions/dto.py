# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""
DTO Exceptions

Purpose:
    Error conditions raised while hydrating or mutating a DTO, plus the
    ambient request lookup failure. Mapped to HTTP by the infrastructure
    exception handlers.

Layer: domain/exceptions
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .base import DomainError


class HydrationError(DomainError):
    """The source map could not be turned into a DTO."""

    code = "DTO_HYDRATION_ERROR"


class MissingPropertiesError(HydrationError):
    """Required properties are absent and the DTO is not partial."""

    code = "DTO_MISSING_PROPERTIES"

    def __init__(self, dto: str, properties: Iterable[str]) -> None:
        names = sorted(properties)
        super().__init__(
            f"{dto} is missing required properties: {', '.join(names)}",
            details={"dto": dto, "properties": names},
        )
        self.properties: list[str] = names


class UnknownPropertiesError(HydrationError):
    """The source carries keys the DTO does not declare."""

    code = "DTO_UNKNOWN_PROPERTIES"

    def __init__(self, dto: str, properties: Iterable[Any]) -> None:
        names = sorted(str(p) for p in properties)
        super().__init__(
            f"{dto} does not declare properties: {', '.join(names)}",
            details={"dto": dto, "properties": names},
        )
        self.properties: list[str] = names


class InvalidPropertyValueError(HydrationError):
    """A value could not be validated or cast to the declared type."""

    code = "DTO_INVALID_PROPERTY_VALUE"

    def __init__(self, dto: str, errors: list[dict[str, Any]]) -> None:
        fields = sorted({str(e["loc"][0]) for e in errors if e.get("loc")})
        super().__init__(
            f"{dto} received invalid values for: {', '.join(fields) or 'unknown'}",
            details={"dto": dto, "errors": errors},
        )
        self.errors: list[dict[str, Any]] = errors


class ImmutableDtoError(DomainError):
    """Assignment was attempted on a DTO built without the MUTABLE flag."""

    code = "DTO_IMMUTABLE"


class RequestContextError(DomainError):
    """No current request is bound to the running context."""

    code = "REQUEST_CONTEXT_MISSING"


class ListenerResolutionError(DomainError):
    """A listener or one of its constructor dependencies cannot be built."""

    code = "DTO_LISTENER_RESOLUTION"
