# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Adapters layer: framework entry points, dependencies and mappers."""
