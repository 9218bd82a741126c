# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Unit tests for the autowiring ``ContainerListener``."""

from __future__ import annotations

import pytest

from fastapi_dto import ContainerListener, Dto, Listener, ListenerResolutionError
from fastapi_dto.config.settings import Settings


class Clock:
    def now(self) -> str:
        return "2025-01-01T00:00:00Z"


class Slugger:
    def __init__(self, clock: Clock) -> None:
        self.clock = clock

    def slug(self, value: str) -> str:
        return value.strip().lower().replace(" ", "-")


class PostData(Dto):
    title: str | None = None
    slug: str | None = None
    environment: str | None = None


class PostListener:
    def __init__(self, slugger: Slugger, settings: Settings, prefix: str = "") -> None:
        self.slugger = slugger
        self.settings = settings
        self.prefix = prefix

    def set_slug(self, value: str) -> str:
        return self.prefix + self.slugger.slug(value)

    def set_environment(self, value: str | None) -> str:
        return value or self.settings.environment.value


class Unresolvable:
    def __init__(self, name: str) -> None:
        self.name = name


class Loop:
    def __init__(self, other: Loop) -> None:
        self.other = other


def test_container_registry_is_separate_from_base_registry() -> None:
    assert ContainerListener.instance() is not Listener.instance()
    assert isinstance(ContainerListener.instance(), ContainerListener)


def test_listener_dependencies_are_autowired() -> None:
    ContainerListener.instance().listen({PostData: PostListener})
    dto = PostData.from_source({"slug": "Hello World", "environment": None})
    assert dto.slug == "hello-world"
    assert dto.environment == "development"


def test_bindings_override_construction() -> None:
    container = ContainerListener.instance()
    container.bind(Slugger, lambda: Slugger(Clock()))
    slugger = container.make(Slugger)
    assert isinstance(slugger.clock, Clock)


def test_make_builds_nested_dependencies() -> None:
    listener = ContainerListener.instance().make(PostListener)
    assert isinstance(listener.slugger.clock, Clock)
    assert listener.prefix == ""


def test_unannotated_builtin_parameters_fail() -> None:
    with pytest.raises(ListenerResolutionError) as info:
        ContainerListener.instance().make(Unresolvable)
    assert info.value.details["parameter"] == "name"


def test_circular_dependencies_fail() -> None:
    with pytest.raises(ListenerResolutionError, match="Circular"):
        ContainerListener.instance().make(Loop)


def test_flush_restores_default_bindings() -> None:
    container = ContainerListener.instance()
    container.bind(Clock, lambda: "not a clock")
    container.flush()
    assert isinstance(container.make(Clock), Clock)
    assert isinstance(container.make(Settings), Settings)
