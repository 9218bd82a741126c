# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Core wiring for host applications."""
