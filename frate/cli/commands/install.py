from __future__ import annotations

import typer

from frate.cli.commands._helpers import fail
from frate.cli.context import build_context
from frate.core.errors import PackageNotLocked
from frate.core.lockfile import Lockfile
from frate.core.result import Err


def install(
    name: str | None = typer.Option(None, "--name", help="Install one specific package."),
) -> None:
    """Install packages from frate.lock (default: all)."""
    ctx = build_context()
    lock = Lockfile.load_or_default(ctx.project.lock_path)
    installer = ctx.installer()

    if name is None:
        if not lock.packages:
            ctx.console.warning("frate.lock has no packages (run: frate sync)")
            return
        result = installer.install_all(lock, ctx.project.root)
        if isinstance(result, Err):
            fail(result.error, ctx.console)
        return

    package = lock.get(name)
    if package is None:
        fail(PackageNotLocked(name), ctx.console)
    ensured = ctx.project.ensure_dirs()
    if isinstance(ensured, Err):
        fail(ensured.error, ctx.console)
    single = installer.install(package, ensured.value)
    if isinstance(single, Err):
        fail(single.error, ctx.console)


def uninstall(
    name: str | None = typer.Option(None, "--name", help="Uninstall one specific package."),
) -> None:
    """Remove installed tools from .frate/bin and .frate/shims (default: all)."""
    ctx = build_context()
    installer = ctx.installer()

    if name is None:
        ctx.console.print(f"{'Uninstalling':>12} all packages")
        cleared = installer.uninstall_all(ctx.project.state_dir)
        if isinstance(cleared, Err):
            fail(cleared.error, ctx.console)
        ctx.console.success("Uninstalled all packages")
        return

    removed = installer.uninstall(name, ctx.project.state_dir)
    if isinstance(removed, Err):
        fail(removed.error, ctx.console)
    if removed.value:
        ctx.console.success(f"Uninstalled {name}")
    else:
        ctx.console.info(f"{name} is not installed")
