# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""HTTP request context and error envelopes."""
