from __future__ import annotations

import subprocess

import typer

from frate.cli.context import build_context
from frate.core.errors import ErrorCode


def which(
    name: str = typer.Argument(..., help="Tool name."),
) -> None:
    """Show the installed executable and shim of a tool."""
    ctx = build_context()
    found = ctx.installer().find_installed(name, ctx.project.state_dir)
    if found.executable is None and found.shim is None:
        ctx.console.print("No installed paths found")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    if found.executable is not None:
        ctx.console.print(f"Found executable at: {found.executable}")
    if found.shim is not None:
        ctx.console.print(f"Found shim at: {found.shim}")


def run(
    name: str = typer.Argument(..., help="Tool name."),
    args: list[str] | None = typer.Argument(None, help="Arguments passed to the tool."),
) -> None:
    """Run the installed binary of a tool from .frate/bin/<name>/."""
    ctx = build_context()
    found = ctx.installer().find_installed(name, ctx.project.state_dir)
    if found.executable is None:
        ctx.console.error(f"{name} is not installed (run: frate install --name {name})")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    proc = subprocess.run([str(found.executable), *(args or [])])
    raise typer.Exit(code=proc.returncode)
