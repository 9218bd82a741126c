# Copyright (c) fastapi-dto.
# SPDX-License-Identifier: MIT
"""fastapi-dto CLI: developer commands.

Commands:
    make MODEL    Generate a DTO for a SQLAlchemy model (``package.module:ClassName``).

Exit codes:
    0  Success.
    1  Target file exists and ``--force`` was not given.
    2  MODEL could not be imported or is not a mapped class.
"""

from __future__ import annotations

import importlib
from pathlib import Path

import typer

from fastapi_dto.adapters.mappers.dto_generator import render_dto_source
from fastapi_dto.application.services.dto_qualifier import DefaultDtoQualifier, QualifiedDto
from fastapi_dto.infrastructure.logging.logger import configure_root_logging, get_json_logger

configure_root_logging()
log = get_json_logger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def main() -> None:
    """Developer tooling for fastapi-dto."""


def _load_model(path: str) -> type:
    """Import ``package.module:ClassName``.

    Raises:
        typer.Exit: With code 2 when the path is malformed or cannot be imported.
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        typer.echo(f"Invalid model path {path!r}; expected 'package.module:ClassName'.", err=True)
        raise typer.Exit(code=2)
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        typer.echo(f"Cannot import {module_name!r}: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    model = getattr(module, attr, None)
    if not isinstance(model, type):
        typer.echo(f"{attr!r} is not a class in {module_name!r}.", err=True)
        raise typer.Exit(code=2)
    return model


@app.command("make")
def make(
    model: str = typer.Argument(..., help="Model path, e.g. 'app.models.user:User'."),  # noqa: B008
    output: Path | None = typer.Option(  # noqa: B008
        None, "--output", "-o", help="Write the DTO to this file instead of stdout."
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),  # noqa: B008
    name: str | None = typer.Option(None, "--name", help="DTO class name override."),  # noqa: B008
) -> None:
    """Generate a DTO class mirroring the columns of a SQLAlchemy model."""
    model_cls = _load_model(model)
    qualified = DefaultDtoQualifier().qualify(model_cls)
    if name:
        try:
            qualified = QualifiedDto(module=qualified.module, class_name=name)
        except ValueError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=2) from exc

    try:
        source = render_dto_source(model_cls, qualified)
    except TypeError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc

    if output is None:
        typer.echo(source, nl=False)
        return

    if output.exists() and not force:
        typer.echo(f"{output} already exists; use --force to overwrite.", err=True)
        raise typer.Exit(code=1)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(source, encoding="utf-8")
    log.info(
        "make.done",
        extra={
            "extra": {
                "model": model,
                "dto": qualified.path,
                "output": str(output),
            }
        },
    )
    typer.echo(f"Created {qualified.path} at {output}")


if __name__ == "__main__":
    app()
