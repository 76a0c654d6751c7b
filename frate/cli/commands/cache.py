"""Archive cache commands (no project required)."""

from __future__ import annotations

import typer

from frate.cli.commands._helpers import fail
from frate.cli.context import global_cache, make_console
from frate.core.result import Err
from frate.output.console import Style

cache_app = typer.Typer(no_args_is_help=True, help="Inspect and clean the archive cache.")


@cache_app.command("list")
def list_cache() -> None:
    """List cached archives."""
    console = make_console()
    cache = global_cache(console)
    entries = cache.entries()
    console.print(f"Cache: {cache.cache_dir}", Style.DIM)
    if not entries:
        console.print("Cache is empty")
        return
    for entry in entries:
        console.print(f"  {entry.relative_to(cache.cache_dir).as_posix()}")


@cache_app.command("clean")
def clean() -> None:
    """Delete every cached archive."""
    console = make_console()
    cache = global_cache(console)
    cleared = cache.clear_all()
    if isinstance(cleared, Err):
        fail(cleared.error, console)
    console.success(f"Cleared {cache.cache_dir}")


@cache_app.command("evict")
def evict(
    pattern: str = typer.Argument(..., help="Remove every cached archive whose name contains this."),
) -> None:
    """Remove matching archives from the cache."""
    console = make_console()
    removed = global_cache(console).evict(pattern)
    if isinstance(removed, Err):
        fail(removed.error, console)
    console.success(f"Removed {removed.value} cached archive(s)")
