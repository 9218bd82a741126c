# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Framework DTO package (Adapters Layer).

Exports:
    - Dto: ``BaseDTO`` with request, model, collection and generic entry points.
"""

from __future__ import annotations

from .base import Dto

__all__ = ["Dto"]
