# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""DTO qualifiers.

Summary:
    A qualifier decides where the DTO generated for a model lives and what
    it is called. The default convention mirrors the model layout:

        app.models.user:User  →  app.dtos.user:UserData
        app.models:User       →  app.dtos:UserData
        app.user:User         →  app.dtos:UserData

Layer:
    application/services
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

__all__ = ["DefaultDtoQualifier", "DtoQualifier", "QualifiedDto"]


@dataclass(frozen=True, slots=True)
class QualifiedDto:
    """Fully qualified location of a DTO class.

    Attributes:
        module: Dotted module path.
        class_name: DTO class name.
    """

    module: str
    class_name: str

    def __post_init__(self) -> None:
        if not self.class_name.isidentifier():
            raise ValueError(f"Invalid DTO class name: {self.class_name!r}")

    @property
    def path(self) -> str:
        """Return ``module:ClassName``."""
        return f"{self.module}:{self.class_name}"


class DtoQualifier(ABC):
    """Strategy mapping a model to its DTO location."""

    @abstractmethod
    def qualify(self, model_cls: type) -> QualifiedDto:
        """Return the DTO location for ``model_cls``."""


class DefaultDtoQualifier(DtoQualifier):
    """Swap the last ``models`` package for ``dtos`` and suffix the class with ``Data``."""

    models_segment = "models"
    dtos_segment = "dtos"
    suffix = "Data"

    def qualify(self, model_cls: type) -> QualifiedDto:
        parts = model_cls.__module__.split(".")
        for index in range(len(parts) - 1, -1, -1):
            if parts[index] == self.models_segment:
                parts[index] = self.dtos_segment
                module = ".".join(parts)
                break
        else:
            module = ".".join([*parts[:-1], self.dtos_segment])
        return QualifiedDto(module=module, class_name=f"{model_cls.__name__}{self.suffix}")
