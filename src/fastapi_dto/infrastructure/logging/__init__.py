# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Structured logging."""
