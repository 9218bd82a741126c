# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Exception taxonomy re-exports."""

from __future__ import annotations

from .base import DomainError
from .dto import (
    HydrationError,
    ImmutableDtoError,
    InvalidPropertyValueError,
    ListenerResolutionError,
    MissingPropertiesError,
    RequestContextError,
    UnknownPropertiesError,
)

__all__ = [
    "DomainError",
    "HydrationError",
    "ImmutableDtoError",
    "InvalidPropertyValueError",
    "ListenerResolutionError",
    "MissingPropertiesError",
    "RequestContextError",
    "UnknownPropertiesError",
]
