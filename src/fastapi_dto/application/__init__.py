# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Application layer: the transport-agnostic DTO engine."""
