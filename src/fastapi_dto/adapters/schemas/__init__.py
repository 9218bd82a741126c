# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Adapter-facing schemas."""
