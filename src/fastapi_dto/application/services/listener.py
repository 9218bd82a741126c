# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""DTO listener registry.

Summary:
    Process-wide registry mapping DTO classes to listener classes. A listener
    is a plain object whose ``set_<field>(value)`` methods intercept values
    on their way into a DTO, which is how injected defaults and derived
    values reach properties without the DTO knowing about their origin.

Design:
    - One registry per registry class (``Listener.instance()`` and any
      subclass keep separate singletons).
    - ``resolve()`` is the construction seam. The base registry calls the
      listener class with no arguments; subclasses may autowire.
    - Registration happens at process start; ``flush()`` exists for tests.

Layer:
    application/services
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Any, ClassVar

__all__ = ["Listener"]

_HOOK_PREFIX = "set_"


class Listener:
    """Registry of DTO listeners keyed by DTO class."""

    _instances: ClassVar[dict[type[Listener], Listener]] = {}
    _instances_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        self._listeners: dict[type, type] = {}

    @classmethod
    def instance(cls) -> Listener:
        """Return the singleton registry for this registry class."""
        with cls._instances_lock:
            existing = cls._instances.get(cls)
            if existing is None:
                existing = cls()
                cls._instances[cls] = existing
            return existing

    def listen(self, listeners: Mapping[type, type]) -> Listener:
        """Register listener classes.

        Args:
            listeners: Mapping of DTO class to listener class.

        Returns:
            The registry, for chaining.
        """
        self._listeners.update(listeners)
        return self

    def flush(self) -> None:
        """Forget every registered listener."""
        self._listeners.clear()

    def listener_class_for(self, dto_cls: type) -> type | None:
        """Return the listener class registered for ``dto_cls`` or its bases."""
        for klass in dto_cls.__mro__:
            listener_cls = self._listeners.get(klass)
            if listener_cls is not None:
                return listener_cls
        return None

    def listener_for(self, dto_cls: type) -> Any | None:
        """Return a resolved listener for ``dto_cls``, if one is registered."""
        listener_cls = self.listener_class_for(dto_cls)
        if listener_cls is None:
            return None
        return self.resolve(listener_cls)

    def resolve(self, listener_cls: type) -> Any:
        """Instantiate a listener class.

        Args:
            listener_cls: Registered listener class.

        Returns:
            A listener instance.
        """
        return listener_cls()

    @staticmethod
    def apply(listener: Any | None, field: str, value: Any) -> Any:
        """Run the ``set_<field>`` hook of ``listener`` over ``value``, if any."""
        if listener is None:
            return value
        hook = getattr(listener, f"{_HOOK_PREFIX}{field}", None)
        if not callable(hook):
            return value
        return hook(value)
