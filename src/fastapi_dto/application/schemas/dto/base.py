# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Base DTO (Application Layer).

Purpose:
    Pydantic base for flag-aware data transfer objects. ``BaseDTO.make`` is
    the single construction primitive: it accepts a canonical source map and
    an integer flag set and returns a hydrated instance, or raises a
    ``HydrationError``.

Flag semantics:
    - ``IGNORE_UNKNOWN_PROPERTIES``: undeclared keys are dropped instead of
      raising ``UnknownPropertiesError``.
    - ``PARTIAL``: absent required properties read as ``None`` and are left
      out of exports instead of raising ``MissingPropertiesError``.
    - ``CAST_PRIMITIVES``: values bound for ``int``/``float``/``bool``/``str``
      fields are coerced. Without it they must already have the declared type.
    - ``MUTABLE``: attribute assignment is allowed after construction.

Layer: application/schemas/dto

Notes:
    - Transport-agnostic: no HTTP or ORM imports. Framework entry points
      live in ``fastapi_dto.adapters.schemas.dto.base``.
"""

from __future__ import annotations

import types
from collections.abc import Mapping
from typing import Any, ClassVar, Self, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationError

from fastapi_dto.application.services.listener import Listener
from fastapi_dto.domain.exceptions.dto import (
    ImmutableDtoError,
    InvalidPropertyValueError,
    MissingPropertiesError,
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
)
from fastapi_dto.domain.interfaces.sources import Arrayable, Jsonable

__all__ = ["BaseDTO"]

_PRIMITIVES: tuple[type, ...] = (bool, int, float, str)


def _primitive_target(annotation: Any) -> type | None:
    """Return the primitive type a field is declared as, if any.

    ``Optional[int]`` and ``int | None`` count as ``int``; wider unions do not.
    """
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        members = [a for a in get_args(annotation) if a is not type(None)]
        return _primitive_target(members[0]) if len(members) == 1 else None
    if annotation in _PRIMITIVES:
        return annotation  # type: ignore[no-any-return]
    return None


def _has_type(value: Any, target: type) -> bool:
    if target is bool:
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if target is float:
        return isinstance(value, int | float)
    return isinstance(value, target)


def _error(field: str, value: Any, message: str, kind: str) -> dict[str, Any]:
    return {"type": kind, "loc": (field,), "msg": message, "input": value}


def _pydantic_errors(exc: ValidationError) -> list[dict[str, Any]]:
    return [dict(e) for e in exc.errors(include_url=False, include_context=False)]


class BaseDTO(BaseModel):
    """Base class for flag-aware DTOs.

    Attributes:
        default_flags: Per-class baseline flags merged into every construction.
    """

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
    )

    default_flags: ClassVar[int] = NONE

    _flags: int = PrivateAttr(default=0)
    _missing: frozenset[str] = PrivateAttr(default_factory=frozenset)

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #
    @classmethod
    def make(cls, data: Mapping[Any, Any] | None = None, flags: int = NONE) -> Self:
        """Hydrate a DTO from a canonical source map.

        Args:
            data: Source map. Keys are property names or aliases.
            flags: Call-site flags, merged with :meth:`get_default_flags`.

        Returns:
            The hydrated DTO.

        Raises:
            UnknownPropertiesError: Undeclared keys without ``IGNORE_UNKNOWN_PROPERTIES``.
            MissingPropertiesError: Absent required properties without ``PARTIAL``.
            InvalidPropertyValueError: A value failed validation or casting.
        """
        effective = compose_flags(cls.get_default_flags(), flags)
        lookup = cls._property_lookup()

        known: dict[str, Any] = {}
        unknown: list[Any] = []
        for key, value in (data or {}).items():
            name = lookup.get(key) if isinstance(key, str) else None
            if name is None:
                unknown.append(key)
            else:
                known[name] = value

        if unknown and not effective & IGNORE_UNKNOWN_PROPERTIES:
            raise UnknownPropertiesError(cls.__name__, unknown)

        missing = frozenset(
            name
            for name, info in cls.model_fields.items()
            if info.is_required() and name not in known
        )
        if missing and not effective & PARTIAL:
            raise MissingPropertiesError(cls.__name__, missing)

        listener = cls.get_listener().listener_for(cls)
        values: dict[str, Any] = {}
        errors: list[dict[str, Any]] = []
        for name, raw in known.items():
            value = Listener.apply(listener, name, raw)
            try:
                values[name] = cls._prepare_value(name, value, effective)
            except ValueError as exc:
                errors.append(_error(name, value, str(exc), "primitive_type"))
        if errors:
            raise InvalidPropertyValueError(cls.__name__, errors)

        try:
            instance = cls._hydrate_partial(values) if missing else cls.model_validate(values)
        except ValidationError as exc:
            raise InvalidPropertyValueError(cls.__name__, _pydantic_errors(exc)) from exc

        for name in missing:
            instance.__dict__[name] = None
        instance._flags = int(effective)
        instance._missing = missing
        return instance

    @classmethod
    def _hydrate_partial(cls, values: dict[str, Any]) -> Self:
        """Validate present properties one by one on an otherwise empty instance."""
        instance = cls.model_construct()
        errors: list[dict[str, Any]] = []
        for name, value in values.items():
            try:
                cls.__pydantic_validator__.validate_assignment(instance, name, value)
            except ValidationError as exc:
                errors.extend(_pydantic_errors(exc))
        if errors:
            raise InvalidPropertyValueError(cls.__name__, errors)
        return instance

    @classmethod
    def _property_lookup(cls) -> dict[str, str]:
        """Map every accepted input key (name or alias) to its property name."""
        lookup: dict[str, str] = {}
        for name, info in cls.model_fields.items():
            lookup[name] = name
            if info.alias:
                lookup[info.alias] = name
            if isinstance(info.validation_alias, str):
                lookup[info.validation_alias] = name
        return lookup

    @classmethod
    def _prepare_value(cls, name: str, value: Any, flags: int) -> Any:
        """Apply primitive casting rules to a single value.

        Raises:
            ValueError: The value does not have the declared primitive type and
                ``CAST_PRIMITIVES`` is not set.
        """
        target = _primitive_target(cls.model_fields[name].annotation)
        if target is None or value is None or _has_type(value, target):
            return value
        if not flags & CAST_PRIMITIVES:
            raise ValueError(
                f"Expected {target.__name__}, got {type(value).__name__} "
                "(enable CAST_PRIMITIVES to coerce)"
            )
        if target is str and isinstance(value, int | float) and not isinstance(value, bool):
            return str(value)
        return value

    # ------------------------------------------------------------------ #
    # Defaults & collaborators
    # ------------------------------------------------------------------ #
    @classmethod
    def get_default_flags(cls) -> DtoFlag:
        """Return the flags merged into every construction of this class."""
        return DtoFlag(cls.default_flags)

    @classmethod
    def get_listener(cls) -> Listener:
        """Return the listener registry consulted during hydration."""
        return Listener.instance()

    # ------------------------------------------------------------------ #
    # Instance API
    # ------------------------------------------------------------------ #
    @property
    def flags(self) -> DtoFlag:
        """Effective flags this instance was built with."""
        return DtoFlag(self._flags)

    def has_flags(self, flags: int) -> bool:
        """Return True when every bit of ``flags`` is set on this instance."""
        return (self._flags & flags) == flags

    def get(self, name: str) -> Any:
        """Return a property value by name.

        Raises:
            UnknownPropertiesError: If the property is not declared.
        """
        if name not in type(self).model_fields:
            raise UnknownPropertiesError(type(self).__name__, [name])
        return getattr(self, name)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible mapping keyed by alias."""
        return self.model_dump(mode="json", by_alias=True, exclude=set(self._missing) or None)

    def to_json(self) -> str:
        """Return the JSON encoding of :meth:`to_dict`."""
        return self.model_dump_json(by_alias=True, exclude=set(self._missing) or None)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            super().__setattr__(name, value)
            return

        cls = type(self)
        if not self._flags & MUTABLE:
            raise ImmutableDtoError(
                f"{cls.__name__} is immutable; build it with the MUTABLE flag to assign {name!r}",
                details={"dto": cls.__name__, "property": name},
            )
        if name not in cls.model_fields:
            raise UnknownPropertiesError(cls.__name__, [name])

        value = Listener.apply(cls.get_listener().listener_for(cls), name, value)
        try:
            value = cls._prepare_value(name, value, self._flags)
        except ValueError as exc:
            raise InvalidPropertyValueError(
                cls.__name__, [_error(name, value, str(exc), "primitive_type")]
            ) from exc
        try:
            self.__pydantic_validator__.validate_assignment(self, name, value)
        except ValidationError as exc:
            raise InvalidPropertyValueError(cls.__name__, _pydantic_errors(exc)) from exc
        self._missing = self._missing - {name}


Arrayable.register(BaseDTO)
Jsonable.register(BaseDTO)
