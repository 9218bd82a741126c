# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Unit tests for the flag-aware ``BaseDTO`` engine."""

from __future__ import annotations

import json
from typing import ClassVar

import pytest
from pydantic import Field

from fastapi_dto import (
    CAST_PRIMITIVES,
    IGNORE_UNKNOWN_PROPERTIES,
    MUTABLE,
    NONE,
    PARTIAL,
    Arrayable,
    BaseDTO,
    ImmutableDtoError,
    InvalidPropertyValueError,
    Jsonable,
    MissingPropertiesError,
    UnknownPropertiesError,
)


class PersonData(BaseDTO):
    name: str
    age: int
    nickname: str | None = None


class AliasedPerson(BaseDTO):
    full_name: str = Field(alias="fullName")


class LenientPerson(BaseDTO):
    default_flags: ClassVar[int] = IGNORE_UNKNOWN_PROPERTIES

    name: str


def test_make_hydrates_declared_properties() -> None:
    dto = PersonData.make({"name": "Ada", "age": 36})
    assert dto.name == "Ada"
    assert dto.age == 36
    assert dto.nickname is None
    assert dto.flags == NONE


def test_make_without_data_and_partial_yields_empty_dto() -> None:
    dto = PersonData.make(None, PARTIAL)
    assert dto.name is None
    assert dto.to_dict() == {"nickname": None}


def test_unknown_keys_raise_unless_ignored() -> None:
    with pytest.raises(UnknownPropertiesError) as info:
        PersonData.make({"name": "Ada", "age": 1, "email": "a@example.com"})
    assert info.value.properties == ["email"]

    dto = PersonData.make({"name": "Ada", "age": 1, "email": "x"}, IGNORE_UNKNOWN_PROPERTIES)
    assert dto.to_dict() == {"name": "Ada", "age": 1, "nickname": None}


def test_missing_keys_raise_unless_partial() -> None:
    with pytest.raises(MissingPropertiesError) as info:
        PersonData.make({"nickname": "A"})
    assert info.value.properties == ["age", "name"]

    dto = PersonData.make({"nickname": "A"}, PARTIAL)
    assert dto.name is None
    assert dto.age is None
    assert dto.to_dict() == {"nickname": "A"}
    assert json.loads(dto.to_json()) == {"nickname": "A"}


def test_primitives_require_exact_type_without_cast() -> None:
    with pytest.raises(InvalidPropertyValueError) as info:
        PersonData.make({"name": "Ada", "age": "36"})
    assert info.value.errors[0]["loc"] == ("age",)


def test_cast_primitives_coerces_scalars() -> None:
    dto = PersonData.make({"name": 42, "age": "36"}, CAST_PRIMITIVES)
    assert dto.name == "42"
    assert dto.age == 36


def test_cast_primitives_still_rejects_garbage() -> None:
    with pytest.raises(InvalidPropertyValueError):
        PersonData.make({"name": "Ada", "age": "thirty"}, CAST_PRIMITIVES)


def test_partial_still_validates_present_values() -> None:
    with pytest.raises(InvalidPropertyValueError):
        PersonData.make({"age": "x"}, PARTIAL | CAST_PRIMITIVES)


def test_alias_and_name_are_both_accepted() -> None:
    by_alias = AliasedPerson.make({"fullName": "Ada Lovelace"})
    by_name = AliasedPerson.make({"full_name": "Ada Lovelace"})
    assert by_alias.full_name == by_name.full_name == "Ada Lovelace"
    assert by_alias.to_dict() == {"fullName": "Ada Lovelace"}


def test_class_default_flags_are_merged() -> None:
    dto = LenientPerson.make({"name": "Ada", "extra": 1}, PARTIAL)
    assert dto.flags == IGNORE_UNKNOWN_PROPERTIES | PARTIAL
    assert dto.has_flags(PARTIAL)
    assert not dto.has_flags(MUTABLE)


def test_dto_is_immutable_by_default() -> None:
    dto = PersonData.make({"name": "Ada", "age": 36})
    with pytest.raises(ImmutableDtoError):
        dto.name = "Grace"
    assert dto.name == "Ada"


def test_mutable_dto_validates_assignments() -> None:
    dto = PersonData.make({"nickname": "A"}, MUTABLE | PARTIAL)
    dto.name = "Grace"
    assert dto.to_dict() == {"name": "Grace", "nickname": "A"}

    with pytest.raises(InvalidPropertyValueError):
        dto.age = "old"
    with pytest.raises(UnknownPropertiesError):
        dto.email = "g@example.com"


def test_get_by_name() -> None:
    dto = PersonData.make({"name": "Ada", "age": 36})
    assert dto.get("age") == 36
    with pytest.raises(UnknownPropertiesError):
        dto.get("email")


def test_dto_exports_through_capabilities() -> None:
    dto = PersonData.make({"name": "Ada", "age": 36})
    assert isinstance(dto, Arrayable)
    assert isinstance(dto, Jsonable)
