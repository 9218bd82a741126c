# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Unit tests for the DTO exception taxonomy."""

from __future__ import annotations

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


def test_hydration_errors_share_a_base() -> None:
    for exc_cls in (MissingPropertiesError, UnknownPropertiesError, InvalidPropertyValueError):
        assert issubclass(exc_cls, HydrationError)
        assert issubclass(exc_cls, DomainError)


def test_codes_are_distinct() -> None:
    codes = {
        HydrationError.code,
        MissingPropertiesError.code,
        UnknownPropertiesError.code,
        InvalidPropertyValueError.code,
        ImmutableDtoError.code,
        RequestContextError.code,
        ListenerResolutionError.code,
    }
    assert len(codes) == 7
    assert RequestContextError.code == "REQUEST_CONTEXT_MISSING"


def test_missing_properties_are_sorted_in_details() -> None:
    exc = MissingPropertiesError("UserData", {"name", "age"})
    assert exc.properties == ["age", "name"]
    assert exc.details == {"dto": "UserData", "properties": ["age", "name"]}
    assert "UserData" in str(exc)


def test_unknown_properties_stringify_non_string_keys() -> None:
    exc = UnknownPropertiesError("RequestData", [0, "extra"])
    assert exc.properties == ["0", "extra"]
    assert exc.code == "DTO_UNKNOWN_PROPERTIES"


def test_invalid_property_value_keeps_errors() -> None:
    errors = [{"type": "int_parsing", "loc": ("foo",), "msg": "bad", "input": "x"}]
    exc = InvalidPropertyValueError("StrictData", errors)
    assert exc.errors == errors
    assert exc.details["dto"] == "StrictData"
