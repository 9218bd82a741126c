# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""FastAPI dependencies and the container-aware listener registry."""
