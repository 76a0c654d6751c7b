from __future__ import annotations

import typer

from frate.cli.commands._helpers import fail, load_manifest
from frate.cli.context import build_context
from frate.core.errors import ErrorCode
from frate.core.lockfile import Lockfile
from frate.core.result import Err


def sync() -> None:
    """Re-resolve every dependency of frate.toml into frate.lock."""
    ctx = build_context()
    manifest = load_manifest(ctx)

    lock = Lockfile.load_or_default(ctx.project.lock_path)
    lock.sync(manifest, ctx.resolver(), ctx.console)
    saved = lock.save(ctx.project.lock_path)
    if isinstance(saved, Err):
        fail(saved.error, ctx.console)

    total = len(manifest.dependencies)
    ctx.console.success(f"Locked {len(lock)} of {total} package(s)")
    if len(lock) < total:
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
