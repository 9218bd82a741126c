# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Base DTO package (Application Layer).

Exports:
    - BaseDTO: Flag-aware pydantic base with the ``make`` construction primitive.
"""

from __future__ import annotations

from .base import BaseDTO

__all__ = ["BaseDTO"]
