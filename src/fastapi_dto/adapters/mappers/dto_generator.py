# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""DTO source generator.

Summary:
    Renders the Python source of a ``Dto`` subclass mirroring the columns of
    a SQLAlchemy mapped class. Used by ``fastapi-dto make``.

Rules:
    - One field per mapped column attribute, in mapper order.
    - Annotation from ``column.type.python_type``; ``Any`` when unknown.
    - Nullable, defaulted and primary-key columns become ``T | None = None``;
      everything else is required.

Layer: adapters/mappers
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Column
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapper

from fastapi_dto.application.services.dto_qualifier import QualifiedDto

__all__ = ["DtoField", "describe_model", "render_dto_source"]


@dataclass(frozen=True, slots=True)
class DtoField:
    """A DTO field derived from a mapped column.

    Attributes:
        name: Attribute key on the model.
        type_name: Annotation name (``int``, ``datetime``, ``Any``...).
        type_module: Module to import the annotation from, or ``None`` for builtins.
        required: Whether the field has no default.
    """

    name: str
    type_name: str
    type_module: str | None
    required: bool

    def __post_init__(self) -> None:
        if not self.name.isidentifier():
            raise ValueError(f"Invalid field name: {self.name!r}")

    def render(self) -> str:
        if self.required:
            return f"    {self.name}: {self.type_name}"
        return f"    {self.name}: {self.type_name} | None = None"


def _python_type(column: Column[Any]) -> tuple[str, str | None]:
    try:
        py_type = column.type.python_type
    except NotImplementedError:
        return "Any", "typing"
    module = py_type.__module__
    return py_type.__name__, (None if module == "builtins" else module)


def _is_required(column: Column[Any]) -> bool:
    return not (
        column.nullable
        or column.primary_key
        or column.default is not None
        or column.server_default is not None
    )


def describe_model(model_cls: type) -> list[DtoField]:
    """Return the DTO fields for a mapped class.

    Raises:
        TypeError: If ``model_cls`` is not a SQLAlchemy mapped class.
    """
    mapper = sa_inspect(model_cls, raiseerr=False)
    if not isinstance(mapper, Mapper):
        raise TypeError(f"{model_cls!r} is not a SQLAlchemy mapped class")

    fields: list[DtoField] = []
    for attr in mapper.column_attrs:
        column = attr.columns[0]
        type_name, type_module = _python_type(column)
        fields.append(
            DtoField(
                name=attr.key,
                type_name=type_name,
                type_module=type_module,
                required=_is_required(column),
            )
        )
    return fields


def render_dto_source(model_cls: type, qualified: QualifiedDto) -> str:
    """Render the module source for the DTO of ``model_cls``.

    Args:
        model_cls: SQLAlchemy mapped class.
        qualified: Target location and class name.

    Returns:
        Python source text ending with a newline.
    """
    fields = describe_model(model_cls)
    # Required fields first so the class stays valid for positional tools.
    ordered = [f for f in fields if f.required] + [f for f in fields if not f.required]

    imports: dict[str, set[str]] = {}
    for f in ordered:
        if f.type_module is not None:
            imports.setdefault(f.type_module, set()).add(f.type_name)

    model_path = f"{model_cls.__module__}.{model_cls.__qualname__}"
    lines = [
        f'"""DTO for :class:`{model_path}`."""',
        "",
        "from __future__ import annotations",
        "",
    ]
    for module in sorted(imports):
        lines.append(f"from {module} import {', '.join(sorted(imports[module]))}")
    if imports:
        lines.append("")
    lines += [
        "from fastapi_dto import Dto",
        "",
        "",
        f"class {qualified.class_name}(Dto):",
        f'    """Data transfer object for :class:`{model_path}`."""',
        "",
    ]
    lines += [f.render() for f in ordered] or ["    pass"]
    return "\n".join(lines) + "\n"
