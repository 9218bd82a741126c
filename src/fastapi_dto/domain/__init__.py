# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Domain layer: flags, capability interfaces and exceptions."""
