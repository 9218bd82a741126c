# src/fastapi_dto/infrastructure/observability/metrics.py
# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Prometheus metrics utilities (registry-aware, hot-reload safe).

Counters are returned by accessor functions bound to the **current**
``prometheus_client.REGISTRY``:

- Safe under hot reload and tests that swap the default registry.
- No duplicate-registration errors.
- Cache automatically resets when the active registry changes.

Example:
    get_dto_constructions_total().labels(dto="UserData", source="model").inc()
"""

from __future__ import annotations

import logging
import threading
from contextlib import suppress

import prometheus_client as prom
from prometheus_client import Counter

from fastapi_dto.config.settings import get_settings

_log = logging.getLogger(__name__)

# Cache keyed by metric name within the currently-active registry.
_registry_id: int | None = None
_counter_cache: dict[str, Counter] = {}
_lock = threading.RLock()


def _ensure_registry() -> None:
    """Reset caches if the active registry changed."""
    global _registry_id
    with _lock:
        rid = id(prom.REGISTRY)
        if _registry_id is None or _registry_id != rid:
            _counter_cache.clear()
            _registry_id = rid


def _lookup_existing_counter(name: str) -> Counter | None:
    """Return a previously-registered ``Counter`` from the active registry.

    Args:
        name: Collector name.

    Returns:
        Counter | None: Existing collector if present and of the correct type.
    """
    with _lock, suppress(Exception):
        mapping = getattr(prom.REGISTRY, "_names_to_collectors", None)
        if isinstance(mapping, dict):
            col = mapping.get(name)
            if isinstance(col, Counter):
                return col
    return None


def _get_or_create_counter(
    name: str,
    help_text: str,
    *,
    labelnames: tuple[str, ...] = (),
) -> Counter:
    """Get or create a registry-bound ``Counter`` with stable identity.

    Strategy:
    1. Return from module cache if present for the active registry.
    2. If the registry already has a collector by this name, reuse it.
    3. Otherwise, register a new collector on the active registry.
    4. If concurrent registration triggers a duplication error, retry step 2.

    Args:
        name: Metric name (snake_case).
        help_text: Human-readable description.
        labelnames: Optional label names tuple.

    Returns:
        Counter: Bound to ``prom.REGISTRY``.
    """
    _ensure_registry()
    with _lock:
        cached = _counter_cache.get(name)
        if isinstance(cached, Counter):
            return cached

        existing = _lookup_existing_counter(name)
        if isinstance(existing, Counter):
            _counter_cache[name] = existing
            return existing

        try:
            c = Counter(name, help_text, labelnames, registry=prom.REGISTRY)
            _counter_cache[name] = c
            return c
        except ValueError as exc:
            if "Duplicated timeseries" in str(exc):
                again = _lookup_existing_counter(name)
                if isinstance(again, Counter):
                    _counter_cache[name] = again
                    return again
            _log.exception("Failed to register Prometheus counter %s", name)
            raise


def get_dto_constructions_total() -> Counter:
    """Return the counter of DTOs built through framework entry points.

    Labels:
        dto: DTO class name.
        source: Normalizer rule that produced the source map.
    """
    return _get_or_create_counter(
        name="dto_constructions_total",
        help_text="DTO instances constructed, by DTO class and source kind.",
        labelnames=("dto", "source"),
    )


def record_dto_construction(dto: str, source: str) -> None:
    """Increment ``dto_constructions_total`` unless metrics are disabled."""
    if not get_settings().metrics_enabled:
        return
    get_dto_constructions_total().labels(dto=dto, source=source).inc()
