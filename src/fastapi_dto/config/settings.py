# src/fastapi_dto/config/settings.py
# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""fastapi-dto Configuration (Pydantic Settings, v2)

Summary:
    Typed, validated process-wide configuration. The only value the DTO core
    consumes is the ``dto.flags`` slot (``DTO_FLAGS``): a flag set merged into
    every construction call.

Design:
    - Pydantic v2 BaseSettings reading the host application .env; keys that
      belong to the host are ignored.
    - Explicit field declarations with validation aliases.
    - ``DTO_FLAGS`` accepts an integer or flag names (``"PARTIAL|MUTABLE"``).
    - Singleton accessor `get_settings()` with LRU cache.
    - Safe, structured logging.
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fastapi_dto.domain.flags import DtoFlag, parse_flags

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Logical deployment environment."""

    DEVELOPMENT = "development"
    TEST = "test"
    CI = "ci"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Typed configuration for fastapi-dto.

    Attributes:
        environment: Logical deployment environment.
        dto_flags: Flags merged into every DTO construction (``dto.flags``).
        log_level: Optional log level override.
        metrics_enabled: Whether construction counters are recorded.
    """

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Logical deployment environment.",
        validation_alias="ENVIRONMENT",
    )

    dto_flags: int = Field(
        default=0,
        ge=0,
        description=(
            "Process-wide DTO flags merged into every construction call. "
            "Accepts an integer or flag names, e.g. 'PARTIAL|MUTABLE'."
        ),
        validation_alias="DTO_FLAGS",
    )

    log_level: str | None = Field(
        default=None,
        description="Override log level (e.g., 'DEBUG', 'INFO'). If not set, defaults are used.",
        validation_alias="LOG_LEVEL",
    )

    metrics_enabled: bool = Field(
        default=True,
        description="Record Prometheus counters for DTO constructions.",
        validation_alias="DTO_METRICS_ENABLED",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        # Host applications share the .env file; their keys are not ours.
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("dto_flags", mode="before")
    @classmethod
    def _parse_dto_flags(cls, value: Any) -> int:
        """Accept flag names as well as integers for ``DTO_FLAGS``."""
        if isinstance(value, DtoFlag):
            return int(value)
        if value is None or isinstance(value, int | str):
            return int(parse_flags(value))
        return value  # type: ignore[no-any-return]

    @property
    def dto_flag_set(self) -> DtoFlag:
        """Return ``dto_flags`` as a ``DtoFlag`` value."""
        return DtoFlag(self.dto_flags)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton `Settings` instance.

    Returns:
        Settings: Validated settings.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        settings = Settings()
        logger.info(
            "Settings initialized",
            extra={
                "extra": {
                    "environment": settings.environment.value,
                    "dto_flags": settings.dto_flags,
                    "dto_flag_names": str(settings.dto_flag_set),
                    "metrics_enabled": settings.metrics_enabled,
                }
            },
        )
        return settings
    except ValidationError as exc:
        logger.exception("Invalid application configuration")
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
