# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Infrastructure layer: HTTP, logging, middleware and metrics."""
