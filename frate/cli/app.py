from __future__ import annotations

import os
from pathlib import Path

import typer

from frate import __version__
from frate.cli.commands.cache import cache_app
from frate.cli.commands.install import install, uninstall
from frate.cli.commands.project import add, init, list_tools, remove
from frate.cli.commands.sync import sync
from frate.cli.commands.which import run, which
from frate.cli.context import PROJECT_ROOT_ENV, VERBOSE_ENV
from frate.core.errors import ErrorCode

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="A local, dev-focused package manager for developer tools.",
)


# Commands
app.command()(init)
app.command()(add)
app.command()(remove)
app.command()(sync)
app.command()(install)
app.command()(uninstall)
app.command("list")(list_tools)
app.command()(which)
app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})(run)

# Sub-apps
app.add_typer(cache_app, name="cache")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show cache and extraction details."),
    project: Path | None = typer.Option(
        None,
        "--project",
        help="Project directory (default: nearest directory with frate.toml).",
    ),
) -> None:
    if verbose:
        os.environ[VERBOSE_ENV] = "1"

    if project is not None:
        try:
            root = project.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --project: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        if not root.is_dir():
            typer.echo(f"error: --project '{root}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        os.environ[PROJECT_ROOT_ENV] = str(root)


def main() -> None:
    app()
