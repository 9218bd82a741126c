# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""Unit tests for the ``DTO_FLAGS`` and related settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from fastapi_dto.config.settings import Environment, Settings, get_settings
from fastapi_dto.domain.flags import CAST_PRIMITIVES, MUTABLE, NONE, PARTIAL
from fixtures.dto_testkit import RequestData


def test_defaults_without_env() -> None:
    settings = get_settings()
    assert settings.dto_flags == 0
    assert settings.dto_flag_set == NONE
    assert settings.metrics_enabled is True
    assert settings.environment is Environment.DEVELOPMENT


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("2", MUTABLE), ("PARTIAL|MUTABLE", PARTIAL | MUTABLE), ("cast_primitives", CAST_PRIMITIVES)],
)
def test_dto_flags_from_env(monkeypatch: pytest.MonkeyPatch, raw: str, expected: int) -> None:
    monkeypatch.setenv("DTO_FLAGS", raw)
    get_settings.cache_clear()
    assert get_settings().dto_flags == int(expected)


def test_invalid_dto_flags_raise_runtime_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DTO_FLAGS", "PARTIAL|READONLY")
    get_settings.cache_clear()
    with pytest.raises(RuntimeError, match="Invalid configuration"):
        get_settings()


def test_metrics_toggle_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DTO_METRICS_ENABLED", "false")
    get_settings.cache_clear()
    assert get_settings().metrics_enabled is False


def test_init_kwargs_by_alias() -> None:
    settings = Settings(DTO_FLAGS="MUTABLE", ENVIRONMENT="test")
    assert settings.dto_flags == int(MUTABLE)
    assert settings.environment is Environment.TEST


def test_host_env_file_keys_are_ignored(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """A host application's .env holds keys of its own; DTOs still build."""
    (tmp_path / ".env").write_text(
        "DATABASE_URL=sqlite://\nSECRET_KEY=not-ours\nDTO_FLAGS=MUTABLE\n", encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()

    assert get_settings().dto_flags == int(MUTABLE)
    dto = RequestData.from_source({"foo": 1})
    assert dto.foo == 1
    assert dto.has_flags(MUTABLE)
