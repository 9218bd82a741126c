# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Source capability interfaces.

Summary:
    The closed set of capabilities the source normalizer recognizes when
    turning an arbitrary object into a canonical source map.

Design:
    These are nominal ABCs, not structural protocols: a type opts in by
    subclassing or by ``Interface.register(SomeType)``. Many unrelated
    objects happen to have an ``all()`` or ``to_dict()`` method (ORM queries,
    NumPy arrays), so duck typing alone would misroute them.

    The normalizer checks them in declaration order:
    ``Enumerable`` → ``Arrayable`` → ``Jsonable`` → ``JsonSerializable``.

Layer:
    domain/interfaces
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

__all__ = [
    "Enumerable",
    "Arrayable",
    "Jsonable",
    "JsonSerializable",
    "RequestSource",
]


class Enumerable(ABC):
    """A collection that can materialize all of its elements at once."""

    @abstractmethod
    def all(self) -> Mapping[Any, Any] | Sequence[Any]:
        """Return every element held by the collection."""


class Arrayable(ABC):
    """An object that can export itself as a mapping."""

    @abstractmethod
    def to_dict(self) -> Mapping[Any, Any] | Sequence[Any]:
        """Return the exported representation."""


class Jsonable(ABC):
    """An object that can export itself as a JSON document."""

    @abstractmethod
    def to_json(self) -> str:
        """Return a JSON string."""


class JsonSerializable(ABC):
    """An object that describes its own JSON-serializable form.

    The method name follows the ``for_json`` hook honored by ``simplejson``.
    """

    @abstractmethod
    def for_json(self) -> Any:
        """Return a JSON-serializable value representing the object."""


class RequestSource(ABC):
    """A request abstraction exposing every input field it carries."""

    @abstractmethod
    def all_fields(self) -> Mapping[str, Any]:
        """Return query, body and path fields merged into one mapping."""
