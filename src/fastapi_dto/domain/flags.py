# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""DTO behavior flags and the flag composer.

Summary:
    Flags are independent boolean switches packed into an integer bit-set.
    They travel with every construction call and decide how lenient the base
    engine is with the incoming source map.

Design:
    - ``DtoFlag`` is an ``IntFlag`` so plain integers and flag members mix
      freely (``DtoFlag.PARTIAL | 8`` is legal).
    - Composition is a bitwise OR: associative, commutative and idempotent.
      Entry points can therefore only ever *add* flags.

Layer:
    domain
"""

from __future__ import annotations

import re
from enum import IntFlag
from functools import reduce
from operator import or_
from typing import Final

__all__ = [
    "DtoFlag",
    "NONE",
    "IGNORE_UNKNOWN_PROPERTIES",
    "MUTABLE",
    "PARTIAL",
    "CAST_PRIMITIVES",
    "compose_flags",
    "parse_flags",
]


class DtoFlag(IntFlag):
    """Behavior switches understood by the base DTO engine.

    Attributes:
        NONE: No special behavior.
        IGNORE_UNKNOWN_PROPERTIES: Extraneous input keys are silently dropped.
        MUTABLE: The DTO accepts attribute assignment after construction.
        PARTIAL: Required properties may be absent from the source.
        CAST_PRIMITIVES: Scalars are coerced to the declared primitive type.
    """

    NONE = 0
    IGNORE_UNKNOWN_PROPERTIES = 1
    MUTABLE = 2
    PARTIAL = 4
    CAST_PRIMITIVES = 8


NONE: Final = DtoFlag.NONE
IGNORE_UNKNOWN_PROPERTIES: Final = DtoFlag.IGNORE_UNKNOWN_PROPERTIES
MUTABLE: Final = DtoFlag.MUTABLE
PARTIAL: Final = DtoFlag.PARTIAL
CAST_PRIMITIVES: Final = DtoFlag.CAST_PRIMITIVES

_SEPARATORS_RE: Final[re.Pattern[str]] = re.compile(r"[|,\s]+")


def compose_flags(*flag_sets: int) -> DtoFlag:
    """Merge any number of flag sets into the effective flag set.

    Args:
        *flag_sets: Integer bit-sets (process defaults, type defaults,
            call-site flags, forced flags, in any order).

    Returns:
        The bitwise OR of every input, or ``DtoFlag.NONE`` when empty.
    """
    return DtoFlag(reduce(or_, (int(f) for f in flag_sets), 0))


def parse_flags(value: int | str | None) -> DtoFlag:
    """Parse a configuration value into a flag set.

    Accepted inputs:
        * ``None`` or an empty string → ``NONE``.
        * An integer, or a string holding a decimal integer.
        * Flag names joined by ``|``, ``,`` or whitespace, case-insensitive
          (e.g. ``"partial|mutable"``).

    Args:
        value: Raw configuration value.

    Returns:
        The parsed flag set.

    Raises:
        ValueError: If a name does not match any flag or the integer is negative.
    """
    if value is None:
        return DtoFlag.NONE
    if isinstance(value, bool):
        raise ValueError("Boolean values are not valid DTO flags")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"DTO flags must be non-negative, got {value}")
        return DtoFlag(value)

    raw = value.strip()
    if not raw:
        return DtoFlag.NONE
    if raw.isdigit():
        return DtoFlag(int(raw))

    parsed = DtoFlag.NONE
    for name in _SEPARATORS_RE.split(raw):
        if not name:
            continue
        try:
            parsed |= DtoFlag[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown DTO flag: {name!r}") from None
    return parsed
