# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Command-line tasks."""
