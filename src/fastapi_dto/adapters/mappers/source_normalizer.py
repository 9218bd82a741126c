# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Source normalizer.

Summary:
    Turns requests, ORM records, collections and arbitrary objects into the
    canonical source map consumed by ``BaseDTO.make``, together with the
    flags each input shape forces.

Dispatch order for generic sources (first match wins):
    1. ``Enumerable``        → ``all()``
    2. ``Arrayable``         → ``to_dict()``
    3. ``Jsonable``          → ``json.loads(to_json())``
    4. ``JsonSerializable``  → ``for_json()``
    5. request               → ``all_fields()``, or query then path parameters
    6. iterable              → mapping items, or (key, value) pairs
    7. fallback coercion     → ``{}`` / dataclass fields / public attributes / ``{0: value}``

Forced flags:
    - request: ``PARTIAL | IGNORE_UNKNOWN_PROPERTIES``
    - model:   ``PARTIAL | IGNORE_UNKNOWN_PROPERTIES | CAST_PRIMITIVES``
    - generic: none

Layer: adapters/mappers
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Final

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import InstanceState
from starlette.datastructures import ImmutableMultiDict
from starlette.requests import Request

from fastapi_dto.domain.flags import (
    CAST_PRIMITIVES,
    IGNORE_UNKNOWN_PROPERTIES,
    NONE,
    PARTIAL,
    DtoFlag,
)
from fastapi_dto.domain.interfaces.sources import (
    Arrayable,
    Enumerable,
    Jsonable,
    JsonSerializable,
    RequestSource,
)

__all__ = [
    "FORCED_MODEL_FLAGS",
    "FORCED_REQUEST_FLAGS",
    "NormalizedSource",
    "SourceKind",
    "is_record",
    "normalize_collection",
    "normalize_model",
    "normalize_request",
    "normalize_source",
]

FORCED_REQUEST_FLAGS: Final[DtoFlag] = PARTIAL | IGNORE_UNKNOWN_PROPERTIES
FORCED_MODEL_FLAGS: Final[DtoFlag] = PARTIAL | IGNORE_UNKNOWN_PROPERTIES | CAST_PRIMITIVES

_JSON_CONTENT_TYPE: Final[str] = "application/json"
_JSON_SUFFIX: Final[str] = "+json"
_FORM_CONTENT_TYPES: Final[tuple[str, ...]] = (
    "application/x-www-form-urlencoded",
    "multipart/form-data",
)


class SourceKind:
    """Names of the rules that can produce a canonical source map."""

    REQUEST = "request"
    MODEL = "model"
    ENUMERABLE = "enumerable"
    ARRAYABLE = "arrayable"
    JSONABLE = "jsonable"
    JSON_SERIALIZABLE = "json_serializable"
    ITERABLE = "iterable"
    FALLBACK = "fallback"


@dataclass(frozen=True, slots=True)
class NormalizedSource:
    """Canonical source map plus the flags its input shape forces.

    Attributes:
        data: Canonical source map, created fresh for one construction call.
        forced_flags: Flags the entry point always adds.
        kind: Name of the rule that produced ``data``.
    """

    data: dict[Any, Any] = field(default_factory=dict)
    forced_flags: DtoFlag = NONE
    kind: str = SourceKind.FALLBACK


# --------------------------------------------------------------------------- #
# Requests
# --------------------------------------------------------------------------- #
def _multi_to_dict(items: ImmutableMultiDict[str, Any]) -> dict[str, Any]:
    """Flatten a multi-dict, turning repeated keys into lists."""
    out: dict[str, Any] = {}
    for key, value in items.multi_items():
        if key in out:
            current = out[key]
            if isinstance(current, list):
                current.append(value)
            else:
                out[key] = [current, value]
        else:
            out[key] = value
    return out


async def _request_body(request: Request) -> dict[str, Any]:
    """Read body fields from a JSON or form request."""
    content_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()

    if content_type.startswith(_FORM_CONTENT_TYPES):
        return _multi_to_dict(await request.form())

    if content_type == _JSON_CONTENT_TYPE or content_type.endswith(_JSON_SUFFIX):
        raw = await request.body()
        if not raw.strip():
            return {}
        payload = json.loads(raw)
        return dict(payload) if isinstance(payload, dict) else {}

    return {}


async def normalize_request(request: Request | RequestSource) -> NormalizedSource:
    """Extract every field a request carries.

    Starlette requests merge query parameters, then body fields, then path
    parameters (later sources win). Other request abstractions expose their
    fields through :class:`RequestSource`.

    Args:
        request: A Starlette request or a ``RequestSource``.

    Returns:
        Normalized source forcing ``PARTIAL | IGNORE_UNKNOWN_PROPERTIES``.

    Raises:
        json.JSONDecodeError: If a JSON body is malformed.
    """
    if isinstance(request, Request):
        data = _multi_to_dict(request.query_params)
        data.update(await _request_body(request))
        data.update(request.path_params)
    else:
        data = dict(request.all_fields())

    return NormalizedSource(data=data, forced_flags=FORCED_REQUEST_FLAGS, kind=SourceKind.REQUEST)


def _request_fields(request: Request | RequestSource) -> dict[str, Any]:
    """Read the fields of a request that are available without awaiting.

    A Starlette body can only be read asynchronously, so only query and path
    parameters are merged here; use ``normalize_request`` for the body.
    """
    if isinstance(request, Request):
        data = _multi_to_dict(request.query_params)
        data.update(request.path_params)
        return data
    return dict(request.all_fields())


# --------------------------------------------------------------------------- #
# ORM records
# --------------------------------------------------------------------------- #
def _record_state(value: Any) -> InstanceState[Any] | None:
    if isinstance(value, type):
        return None
    state = sa_inspect(value, raiseerr=False)
    return state if isinstance(state, InstanceState) else None


def is_record(value: Any) -> bool:
    """Return True when ``value`` is a SQLAlchemy mapped instance."""
    return _record_state(value) is not None


def _refresh_expired_columns(state: InstanceState[Any]) -> None:
    """Reload expired column attributes of a persistent record in one SELECT.

    Detached records and records owned by an ``AsyncSession`` are left as they
    are; relationships are never loaded here.
    """
    session = state.session
    if session is None or state.key is None or state.async_session is not None:
        return
    expired = [
        attr.key for attr in state.mapper.column_attrs if attr.key in state.expired_attributes
    ]
    if expired:
        session.refresh(state.obj(), attribute_names=expired)


def _export_record(record: Any, seen: frozenset[int]) -> dict[str, Any]:
    """Export loaded attributes of a record without lazy-loading relationships."""
    state = _record_state(record)
    if state is None:
        return {}

    _refresh_expired_columns(state)
    loaded = state.dict
    unloaded = state.unloaded
    data: dict[str, Any] = {}
    for attr in state.mapper.column_attrs:
        if attr.key in unloaded or attr.key not in loaded:
            continue
        data[attr.key] = loaded[attr.key]

    seen = seen | {id(record)}
    for rel in state.mapper.relationships:
        if rel.key in unloaded or rel.key not in loaded:
            continue
        related = loaded[rel.key]
        if related is None:
            data[rel.key] = None
        elif is_record(related):
            if id(related) not in seen:
                data[rel.key] = _export_record(related, seen)
        else:
            data[rel.key] = [
                _export_record(item, seen) for item in related if id(item) not in seen
            ]
    return data


def normalize_model(record: Any) -> NormalizedSource:
    """Extract the loaded attributes of an ORM record.

    Column attributes are keyed by their mapped attribute name. Expired
    columns of a record attached to a synchronous session are reloaded first
    (for example after a commit with ``expire_on_commit``); deferred columns
    and expired columns of detached records are skipped. Relationships are
    included only when already loaded on the instance.

    Args:
        record: SQLAlchemy mapped instance.

    Returns:
        Normalized source forcing ``PARTIAL | IGNORE_UNKNOWN_PROPERTIES | CAST_PRIMITIVES``.

    Raises:
        sqlalchemy.exc.InvalidRequestError: An expired record's row is gone.
    """
    return NormalizedSource(
        data=_export_record(record, frozenset()),
        forced_flags=FORCED_MODEL_FLAGS,
        kind=SourceKind.MODEL,
    )


# --------------------------------------------------------------------------- #
# Generic sources
# --------------------------------------------------------------------------- #
def _iterable_to_dict(value: Iterable[Any]) -> dict[Any, Any]:
    if isinstance(value, Mapping):
        return dict(value.items())
    data: dict[Any, Any] = {}
    for index, item in enumerate(value):
        if isinstance(item, tuple) and len(item) == 2:
            data[item[0]] = item[1]
        else:
            data[index] = item
    return data


def _is_iterable(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, str | bytes | bytearray)


def _coerce(value: Any) -> dict[Any, Any]:
    """Coerce any value into a mapping; never fails."""
    if value is None:
        return {}
    if _is_iterable(value):
        return _iterable_to_dict(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    if not isinstance(value, type) and hasattr(value, "__dict__"):
        return {k: v for k, v in vars(value).items() if not k.startswith("_")}
    return {0: value}


def normalize_source(value: Any) -> NormalizedSource:
    """Normalize an arbitrary source into a canonical map.

    Args:
        value: Any object. Requests contribute query and path parameters
            only; their body needs the async ``normalize_request``.

    Returns:
        Normalized source; no flags are forced.

    Raises:
        json.JSONDecodeError: If a ``Jsonable`` exports malformed JSON.
    """
    if isinstance(value, Enumerable):
        return NormalizedSource(data=_coerce(value.all()), kind=SourceKind.ENUMERABLE)
    if isinstance(value, Arrayable):
        return NormalizedSource(data=_coerce(value.to_dict()), kind=SourceKind.ARRAYABLE)
    if isinstance(value, Jsonable):
        return NormalizedSource(data=_coerce(json.loads(value.to_json())), kind=SourceKind.JSONABLE)
    if isinstance(value, JsonSerializable):
        return NormalizedSource(data=_coerce(value.for_json()), kind=SourceKind.JSON_SERIALIZABLE)
    # A Starlette request is a Mapping over its ASGI scope.
    if isinstance(value, Request | RequestSource):
        return NormalizedSource(data=_request_fields(value), kind=SourceKind.REQUEST)
    if _is_iterable(value):
        return NormalizedSource(data=_iterable_to_dict(value), kind=SourceKind.ITERABLE)
    return NormalizedSource(data=_coerce(value), kind=SourceKind.FALLBACK)


def normalize_collection(
    items: Any,
) -> list[NormalizedSource] | dict[Any, NormalizedSource]:
    """Normalize every item of a collection, preserving order and keys.

    Records go through :func:`normalize_model`; anything else through
    :func:`normalize_source`.

    Args:
        items: ``Enumerable``, mapping or iterable of items.

    Returns:
        A dict with the same keys for mapping input, otherwise a list.
    """
    if isinstance(items, Enumerable):
        items = items.all()
    if isinstance(items, Mapping):
        return {key: _normalize_item(item) for key, item in items.items()}
    return [_normalize_item(item) for item in items]


def _normalize_item(item: Any) -> NormalizedSource:
    return normalize_model(item) if is_record(item) else normalize_source(item)
