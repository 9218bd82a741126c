# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Source normalization and DTO source generation."""
