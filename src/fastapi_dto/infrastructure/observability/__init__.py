# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Metrics."""
