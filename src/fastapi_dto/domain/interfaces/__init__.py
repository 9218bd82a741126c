# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Source capability interfaces."""
