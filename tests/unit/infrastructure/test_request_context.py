# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Unit tests for the ambient request context."""

from __future__ import annotations

import pytest

from fastapi_dto import RequestContextError
from fastapi_dto.infrastructure.http.request_context import (
    get_current_request,
    reset_current_request,
    set_current_request,
)


def test_get_without_binding_raises() -> None:
    with pytest.raises(RequestContextError):
        get_current_request()


def test_bindings_nest_and_restore() -> None:
    outer, inner = object(), object()
    t1 = set_current_request(outer)
    t2 = set_current_request(inner)
    assert get_current_request() is inner
    reset_current_request(t2)
    assert get_current_request() is outer
    reset_current_request(t1)
    with pytest.raises(RequestContextError):
        get_current_request()
