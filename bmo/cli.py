"""Typer-based CLI for bmo."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, NoReturn

import typer
from rich.logging import RichHandler

from . import render
from .config import resolve_config_path
from .exceptions import BmoError
from .registry import open_registry
from .workspace import WorkspaceService

PROG_NAME = "bmo"

app = typer.Typer(
    help="bmo is a tool for managing many repositories as if they were a monorepo.",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Path to the workspace config file (default: $BMO_CONFIG or ~/.bmoconfig).",
        dir_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show additional debug information."),
) -> None:
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = resolve_config_path(config)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


@app.command(help="Clone a repository into a new directory and add to workspace.")
def clone(
    ctx: typer.Context,
    workspace: str = typer.Argument(..., help="Workspace to register the clone in."),
    url: str = typer.Argument(..., help="URL of the repository to clone."),
    path: Path | None = typer.Argument(
        None,
        help="Destination directory. Defaults to the repository name in the current directory.",
    ),
) -> None:
    with _session(ctx) as service:
        target = service.clone(workspace, url, path)
    render.success(f"Cloned {url} into {target}")


@app.command(help="Show the commit logs for the workspace.")
def log(
    ctx: typer.Context,
    workspace: str = typer.Argument(..., help="Workspace to read history from."),
    oneline: bool = typer.Option(False, "--oneline", "-oneline", help='Mimics "git log --oneline".'),
) -> None:
    with _session(ctx) as service:
        service.log(workspace, typer.echo, oneline=oneline)


@app.command(help="Show the working tree status for the workspace.")
def status(
    ctx: typer.Context,
    workspace: str = typer.Argument(..., help="Workspace to inspect."),
    short: bool = typer.Option(False, "--short", "-short", "-s", help="Give the output in the short-format."),
) -> None:
    with _session(ctx) as service:
        service.status(workspace, typer.echo, short=short)


@app.command(help="Add file to the workspace stage.")
def add(
    ctx: typer.Context,
    workspace: str = typer.Argument(..., help="Workspace the files belong to."),
    files: list[str] = typer.Argument(
        ...,
        help="Files to stage as <repo>/<file>; several may be joined with commas.",
    ),
) -> None:
    with _session(ctx) as service:
        service.add(workspace, files)


@contextmanager
def _session(ctx: typer.Context) -> Iterator[WorkspaceService]:
    """Open the registry for one command; it is saved only if the command succeeds."""

    try:
        with open_registry(ctx.obj["config_path"]) as registry:
            yield WorkspaceService(registry=registry, working_dir=Path.cwd())
    except BmoError as err:
        _fail(str(err))


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=render.err_console, show_path=False)],
        force=True,
    )


def _fail(message: str, code: int = 1) -> NoReturn:
    typer.secho(f"{PROG_NAME}: {message}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code)


def run() -> None:
    """Console-script entry point; usage errors exit with 1 like any other failure."""

    try:
        app(prog_name=PROG_NAME)
    except SystemExit as exc:
        if exc.code not in (0, None):
            raise SystemExit(1) from exc
        raise


if __name__ == "__main__":
    run()
