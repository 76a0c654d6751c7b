"""Tests for frate.core.lockfile."""

from pathlib import Path

from frate.core.errors import NotFound, ResolveError, VersionNotFound
from frate.core.lockfile import LockedPackage, Lockfile
from frate.core.manifest import Manifest
from frate.core.result import Err, Ok, Result
from frate.output.console import MockConsole
from frate.tools.resolver import ResolvedDependency


class FakeResolver:
    """Resolver answering from a fixed table."""

    def __init__(self, table: dict[str, Result[ResolvedDependency, ResolveError]]) -> None:
        self.table = table
        self.calls: list[tuple[str, str]] = []

    def resolve(self, tool_name: str, version: str) -> Result[ResolvedDependency, ResolveError]:
        self.calls.append((tool_name, version))
        return self.table.get(tool_name, Err(NotFound(tool_name, "mock://", "unknown")))


def _resolved(name: str, version: str = "1.0.0") -> Ok[ResolvedDependency]:
    return Ok(
        ResolvedDependency(
            name=name,
            version=version,
            key=f"{version}-x86_64-unknown-linux-gnu",
            url=f"https://example.com/{name}-{version}.tar.gz",
            hash=f"sha256:{name}hash",
        )
    )


class TestLockedPackage:
    def test_digest_strips_prefix(self) -> None:
        package = LockedPackage("just", "1.42.1", "https://x/just.tar.gz", "sha256:ABC")
        assert package.digest == "abc"


class TestSync:
    def test_resolves_in_manifest_order(self) -> None:
        manifest = Manifest("demo", dependencies={"b": "2.0.0", "a": "1.0.0"})
        resolver = FakeResolver({"a": _resolved("a", "1.0.0"), "b": _resolved("b", "2.0.0")})
        lock = Lockfile()

        lock.sync(manifest, resolver, MockConsole())

        assert [p.name for p in lock.packages] == ["b", "a"]
        assert resolver.calls == [("b", "2.0.0"), ("a", "1.0.0")]

    def test_stores_bare_version(self) -> None:
        manifest = Manifest("demo", dependencies={"a": "1.0.0"})
        lock = Lockfile()
        lock.sync(manifest, FakeResolver({"a": _resolved("a")}), MockConsole())
        assert lock.packages[0].version == "1.0.0"

    def test_partial_success_warns_and_continues(self) -> None:
        manifest = Manifest("demo", dependencies={"a": "1.0.0", "b": "1.0.0"})
        resolver = FakeResolver(
            {"a": _resolved("a"), "b": Err(VersionNotFound("b", ("1.0.0-x86_64-unknown-linux-gnu",)))}
        )
        console = MockConsole()
        lock = Lockfile()

        lock.sync(manifest, resolver, console)

        assert [p.name for p in lock.packages] == ["a"]
        assert console.has_warning()
        assert console.find("Failed to resolve b@1.0.0")

    def test_replaces_previous_contents(self) -> None:
        lock = Lockfile([LockedPackage("old", "0.1.0", "https://x/old.zip", "aa")])
        manifest = Manifest("demo", dependencies={"a": "1.0.0"})
        lock.sync(manifest, FakeResolver({"a": _resolved("a")}), MockConsole())
        assert "old" not in lock
        assert "a" in lock

    def test_skips_duplicate_registry_names(self) -> None:
        # Two manifest entries that the registry reports under the same name
        manifest = Manifest("demo", dependencies={"rg": "14.1.0", "ripgrep": "14.1.0"})
        resolver = FakeResolver(
            {"rg": _resolved("ripgrep", "14.1.0"), "ripgrep": _resolved("ripgrep", "14.1.0")}
        )
        lock = Lockfile()
        lock.sync(manifest, resolver, MockConsole())
        assert len(lock) == 1

    def test_every_failure_gives_empty_lock(self) -> None:
        manifest = Manifest("demo", dependencies={"a": "1.0.0"})
        lock = Lockfile()
        lock.sync(manifest, FakeResolver({}), MockConsole())
        assert len(lock) == 0


class TestLockfileFile:
    def test_save_and_load(self, tmp_path: Path) -> None:
        path = tmp_path / "frate.lock"
        lock = Lockfile(
            [
                LockedPackage("just", "1.42.1", "https://x/just.tar.gz", "sha256:aa"),
                LockedPackage("rg", "14.1.0", "https://x/rg.zip", "bb"),
            ]
        )
        assert isinstance(lock.save(path), Ok)
        assert Lockfile.load_or_default(path) == lock

    def test_layout(self, tmp_path: Path) -> None:
        path = tmp_path / "frate.lock"
        Lockfile([LockedPackage("just", "1.42.1", "https://x/just.tar.gz", "aa")]).save(path)
        text = path.read_text(encoding="utf-8")
        assert "[[package]]" in text
        assert 'source = "https://x/just.tar.gz"' in text

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert len(Lockfile.load_or_default(tmp_path / "frate.lock")) == 0

    def test_garbage_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "frate.lock"
        path.write_text("not = [toml", encoding="utf-8")
        assert len(Lockfile.load_or_default(path)) == 0

    def test_incomplete_record_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "frate.lock"
        path.write_text('[[package]]\nname = "just"\n', encoding="utf-8")
        assert len(Lockfile.load_or_default(path)) == 0

    def test_get(self) -> None:
        package = LockedPackage("just", "1.42.1", "https://x/just.tar.gz", "aa")
        lock = Lockfile([package])
        assert lock.get("just") == package
        assert lock.get("nope") is None
