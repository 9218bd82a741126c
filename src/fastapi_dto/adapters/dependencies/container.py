# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Container-aware listener registry.

Summary:
    Listener registry whose listeners get their constructor dependencies
    injected. Parameters are resolved from explicit bindings first
    (``Settings`` is bound to :func:`get_settings` out of the box), then by
    recursively constructing the annotated class. Parameters with defaults
    keep their defaults; builtin scalars such as ``str`` are never guessed.

Layer: adapters/dependencies
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Callable
from typing import Any

from fastapi_dto.application.services.listener import Listener
from fastapi_dto.config.settings import Settings, get_settings
from fastapi_dto.domain.exceptions.dto import ListenerResolutionError

__all__ = ["ContainerListener"]


class ContainerListener(Listener):
    """Listener registry that autowires listener constructors."""

    def __init__(self) -> None:
        super().__init__()
        self._bindings: dict[type, Callable[[], Any]] = {}
        self._bind_defaults()

    def _bind_defaults(self) -> None:
        self._bindings[Settings] = get_settings

    def bind(self, abstract: type, factory: Callable[[], Any]) -> ContainerListener:
        """Register a factory used whenever ``abstract`` is requested.

        Args:
            abstract: Type requested by a constructor annotation.
            factory: Zero-argument callable producing the instance.

        Returns:
            The registry, for chaining.
        """
        self._bindings[abstract] = factory
        return self

    def flush(self) -> None:
        """Forget registered listeners and custom bindings."""
        super().flush()
        self._bindings.clear()
        self._bind_defaults()

    def resolve(self, listener_cls: type) -> Any:
        """Instantiate ``listener_cls`` with its dependencies injected."""
        return self.make(listener_cls)

    def make(self, cls: type, _chain: tuple[type, ...] = ()) -> Any:
        """Build ``cls``, resolving constructor parameters from type hints.

        Args:
            cls: Class to instantiate.

        Returns:
            The constructed instance.

        Raises:
            ListenerResolutionError: On circular dependencies or parameters
                that have neither a default nor a resolvable class annotation.
        """
        factory = self._bindings.get(cls)
        if factory is not None:
            return factory()

        if cls in _chain:
            path = " -> ".join(c.__name__ for c in (*_chain, cls))
            raise ListenerResolutionError(f"Circular dependency: {path}")

        try:
            hints = typing.get_type_hints(cls.__init__)
        except (NameError, TypeError) as exc:
            raise ListenerResolutionError(
                f"Cannot resolve annotations of {cls.__name__}: {exc}"
            ) from exc

        try:
            signature = inspect.signature(cls)
        except (TypeError, ValueError) as exc:
            raise ListenerResolutionError(f"Cannot inspect {cls.__name__}: {exc}") from exc

        kwargs: dict[str, Any] = {}
        for param in signature.parameters.values():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            if param.default is not param.empty:
                continue
            hint = hints.get(param.name)
            if not isinstance(hint, type) or hint.__module__ == "builtins":
                raise ListenerResolutionError(
                    f"Cannot resolve parameter {param.name!r} of {cls.__name__}",
                    details={"class": cls.__name__, "parameter": param.name},
                )
            kwargs[param.name] = self.make(hint, (*_chain, cls))
        return cls(**kwargs)
