"""Manifest commands: init, add, remove, list."""

from __future__ import annotations

import typer

from frate.cli.commands._helpers import fail, load_manifest
from frate.cli.context import build_context, make_console, start_dir
from frate.core.errors import ErrorCode
from frate.core.lockfile import Lockfile
from frate.core.manifest import Manifest, parse_requirement
from frate.core.project import Project
from frate.core.result import Err
from frate.output.console import Style
from frate.tools.cache import archive_name


def init(
    name: str | None = typer.Option(None, "--name", help="Project name (default: directory name)."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing frate.toml."),
) -> None:
    """Create frate.toml and the .frate directory in the current directory."""
    console = make_console()
    project = Project(start_dir().resolve())

    if project.manifest_path.exists() and not force:
        console.error(f"{project.manifest_path} already exists (use --force to overwrite)")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    ensured = project.ensure_dirs()
    if isinstance(ensured, Err):
        fail(ensured.error, console)

    manifest = Manifest.default(name or project.root.name)
    saved = manifest.save(project.manifest_path)
    if isinstance(saved, Err):
        fail(saved.error, console)
    console.success(f"Initialized {manifest.name} in {project.root}")


def add(
    requirement: str = typer.Argument(..., help="<name>@<version>, no leading 'v'."),
) -> None:
    """Add a tool to frate.toml and re-sync frate.lock. The tool is not installed."""
    ctx = build_context()
    parsed = parse_requirement(requirement)
    if isinstance(parsed, Err):
        fail(parsed.error, ctx.console)
    name, version = parsed.value

    manifest = load_manifest(ctx)
    added = manifest.add(name, version)
    if isinstance(added, Err):
        fail(added.error, ctx.console)
    saved = manifest.save(ctx.project.manifest_path)
    if isinstance(saved, Err):
        fail(saved.error, ctx.console)
    ctx.console.success(f"Added {name}@{version}")

    lock = Lockfile.load_or_default(ctx.project.lock_path)
    lock.sync(manifest, ctx.resolver(), ctx.console)
    saved = lock.save(ctx.project.lock_path)
    if isinstance(saved, Err):
        fail(saved.error, ctx.console)
    if name not in lock:
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
    ctx.console.print(f"Run `frate install --name {name}` to install it", Style.DIM)


def remove(
    name: str = typer.Argument(..., help="Tool name."),
) -> None:
    """Remove a tool from frate.toml and frate.lock. Installed files are kept."""
    ctx = build_context()
    manifest = load_manifest(ctx)
    if not manifest.remove(name):
        ctx.console.error(f"{name} is not a dependency")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    saved = manifest.save(ctx.project.manifest_path)
    if isinstance(saved, Err):
        fail(saved.error, ctx.console)

    lock = Lockfile.load_or_default(ctx.project.lock_path)
    if name in lock:
        lock.packages = [p for p in lock.packages if p.name != name]
        saved = lock.save(ctx.project.lock_path)
        if isinstance(saved, Err):
            fail(saved.error, ctx.console)
    ctx.console.success(f"Removed {name}")


def list_tools(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show source and hash."),
) -> None:
    """List the tools in frate.toml with lock, install and cache status."""
    ctx = build_context()
    manifest = load_manifest(ctx)
    if not manifest.dependencies:
        ctx.console.print("No dependencies")
        return

    lock = Lockfile.load_or_default(ctx.project.lock_path)
    installer = ctx.installer()
    cache = ctx.cache
    for name, version in manifest.dependencies.items():
        ctx.console.print(f"{name}: {version}", Style.BOLD)
        locked = lock.get(name)
        if locked is None:
            ctx.console.print("   unlocked", Style.WARNING)
        else:
            ctx.console.print(f"   locked at: {locked.version}")
            if verbose:
                ctx.console.print(f"   source: {locked.source}", Style.DIM)
                ctx.console.print(f"   hash: {locked.hash}", Style.DIM)
            if cache.contains(archive_name(locked.source)):
                ctx.console.print("   cached", Style.DIM)

        if installer.find_installed(name, ctx.project.state_dir).installed:
            ctx.console.print("   installed", Style.SUCCESS)
        else:
            ctx.console.print("   not installed", Style.DIM)
