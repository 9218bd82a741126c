# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Composition helpers for host applications."""
