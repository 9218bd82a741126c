# tests/arch/test_layering.py
# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Clean Architecture layering guardrail using grimp import graph.

This test builds an import graph for the `fastapi_dto` package and enforces
a strict layering policy:

    domain         → may depend only on domain
    application    → may depend on {domain, application}
    adapters       → may depend on {domain, application, adapters, infrastructure}
    infrastructure → may depend on {domain, application, adapters, infrastructure}

The transport-agnostic DTO engine lives in `application` and must never
import FastAPI, Starlette or SQLAlchemy wiring from the outer rings.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

import grimp
from grimp import ImportGraph

ROOT_PACKAGE: Final[str] = "fastapi_dto"

LAYERS: Final[frozenset[str]] = frozenset({"domain", "application", "adapters", "infrastructure"})

# Map from top-level "layer" to the set of layers it is allowed to import.
ALLOWED_DEPENDENCIES: Mapping[str, set[str]] = {
    "domain": {"domain"},
    "application": {"domain", "application"},
    "adapters": {"domain", "application", "adapters", "infrastructure"},
    "infrastructure": {"domain", "application", "adapters", "infrastructure"},
}

# Third-party frameworks the inner layers must stay free of.
INNER_FORBIDDEN: Final[tuple[str, ...]] = ("fastapi", "starlette", "sqlalchemy")


def _build_graph() -> ImportGraph:
    """Build the import graph for the root package, including external packages."""
    return grimp.build_graph(ROOT_PACKAGE, include_external_packages=True)


def _layer_for_module(module_name: str) -> str | None:
    """Infer the logical layer for a module.

        fastapi_dto.domain.*          → "domain"
        fastapi_dto.application.*     → "application"
        fastapi_dto.adapters.*        → "adapters"
        fastapi_dto.infrastructure.*  → "infrastructure"

    Anything else (config, dependencies, tasks) returns None and is ignored.
    """
    if not module_name.startswith(f"{ROOT_PACKAGE}."):
        return None
    top = module_name[len(ROOT_PACKAGE) + 1 :].split(".", 1)[0]
    return top if top in LAYERS else None


def _find_layering_violations(graph: ImportGraph) -> list[str]:
    violations: set[str] = set()

    for importer in sorted(graph.modules):
        importer_layer = _layer_for_module(importer)
        if importer_layer is None:
            continue

        allowed_targets = ALLOWED_DEPENDENCIES[importer_layer]
        for imported in graph.find_modules_directly_imported_by(importer):
            if importer_layer in {"domain", "application"} and imported.split(".")[0] in (
                INNER_FORBIDDEN
            ):
                violations.add(f"{importer} ({importer_layer}) -> {imported} (framework)")
                continue

            imported_layer = _layer_for_module(imported)
            if imported_layer is None:
                continue
            if imported_layer not in allowed_targets:
                violations.add(
                    f"{importer} ({importer_layer}) -> {imported} ({imported_layer}) "
                    "is not allowed by ALLOWED_DEPENDENCIES"
                )

    return sorted(violations)


def test_layering_respects_clean_architecture() -> None:
    """Ensure that high-level layering rules are respected."""
    violations = _find_layering_violations(_build_graph())

    if violations:
        message = "Layering violations detected:\n" + "\n".join(violations)
        raise AssertionError(message)
