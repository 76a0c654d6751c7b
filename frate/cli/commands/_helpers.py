"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from frate.core.errors import FrateError
from frate.core.manifest import Manifest
from frate.core.result import Err
from frate.output.errors import error_exit_code, print_error

if TYPE_CHECKING:
    from frate.cli.context import CLIContext
    from frate.output.console import ConsoleProtocol


def fail(error: FrateError, console: ConsoleProtocol) -> NoReturn:
    """Render ``error`` and exit with its code."""
    print_error(error, console)
    raise typer.Exit(code=error_exit_code(error))


def load_manifest(ctx: CLIContext) -> Manifest:
    result = Manifest.load(ctx.project.manifest_path)
    if isinstance(result, Err):
        fail(result.error, ctx.console)
    return result.value
