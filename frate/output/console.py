"""Console output abstraction.

Services report progress and non-fatal problems through a ``ConsoleProtocol``
instead of printing directly, so the same code drives the rich terminal
output and the captured output used in tests.

Levels and how they render:

    success   "        Done <message>"   stdout, bold green tag
    error     "error: <message>"         stderr
    warning   "warning: <message>"       stderr
    info      "info: <message>"          stdout
    debug     "<message>"                stdout, dim, verbose consoles only
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
]


class Style(Enum):
    """Semantic styles; each console maps them to its own rendering."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()
    BOLD = auto()
    HEADER = auto()

    def __str__(self) -> str:
        return self.name.lower()


# Level -> (plain-text tag, rich markup style of the tag)
_TAGS: dict[Style, tuple[str, str]] = {
    Style.SUCCESS: (f"{'Done':>12}", "bold green"),
    Style.ERROR: ("error:", "red bold"),
    Style.WARNING: ("warning:", "yellow"),
    Style.INFO: ("info:", "cyan"),
}


class ConsoleProtocol(Protocol):
    """Line-oriented output used by the resolver, lockfile, installer and CLI."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Write one line as-is (no markup interpretation)."""
        ...

    def success(self, message: str) -> None:
        """Report a completed step, e.g. an installed package."""
        ...

    def error(self, message: str) -> None:
        """Report a failure; goes to stderr on a terminal."""
        ...

    def warning(self, message: str) -> None:
        """Report a problem that does not stop the current operation."""
        ...

    def info(self, message: str) -> None:
        ...

    def debug(self, message: str) -> None:
        """Diagnostic detail (cache hits, extraction targets); dropped unless verbose."""
        ...

    def header(self, message: str) -> None:
        ...

    def newline(self) -> None:
        ...


class RichConsole:
    """Terminal console backed by Rich.

    Messages are escaped before they are wrapped in markup, so URLs and
    paths containing ``[...]`` print literally.
    """

    def __init__(self, *, verbose: bool = False) -> None:
        # Rich is only needed once something is printed for real
        from rich.console import Console
        from rich.markup import escape

        self.verbose = verbose
        self._escape = escape
        self._out = Console(highlight=False)
        self._err = Console(stderr=True, highlight=False)
        self._plain_styles = {
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "cyan",
            Style.DIM: "dim",
            Style.BOLD: "bold",
            Style.HEADER: "blue bold",
        }

    def _tagged(self, level: Style, message: str) -> str:
        tag, markup = _TAGS[level]
        return f"[{markup}]{tag}[/{markup}] {self._escape(message)}"

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._plain_styles.get(style)
        self._out.print(message, style=rich_style, markup=False)

    def success(self, message: str) -> None:
        self._out.print(self._tagged(Style.SUCCESS, message))

    def error(self, message: str) -> None:
        self._err.print(self._tagged(Style.ERROR, message))

    def warning(self, message: str) -> None:
        self._err.print(self._tagged(Style.WARNING, message))

    def info(self, message: str) -> None:
        self._out.print(self._tagged(Style.INFO, message))

    def debug(self, message: str) -> None:
        if self.verbose:
            self._out.print(message, style="dim", markup=False)

    def header(self, message: str) -> None:
        self._out.print()
        self._out.print(message, style="blue bold", markup=False)

    def newline(self) -> None:
        self._out.print()


@dataclass
class OutputRecord:
    """One captured line and the style it was emitted with."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console that records lines instead of printing them.

    Tagged levels are stored with their plain tag (``"warning: ..."``;
    success lines as ``"Done ..."``) so assertions can match on the text a
    user would read. Debug lines follow ``verbose`` exactly like
    ``RichConsole`` and are stored as ``Style.DIM``.
    """

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)
    verbose: bool = True

    def _record(self, level: Style, message: str) -> None:
        tag = _TAGS[level][0].strip()
        self.outputs.append(OutputRecord(f"{tag} {message}", level))

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self._record(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._record(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._record(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._record(Style.INFO, message)

    def debug(self, message: str) -> None:
        if self.verbose:
            self.outputs.append(OutputRecord(message, Style.DIM))

    def header(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.HEADER))

    def newline(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        """Everything captured, one line per record."""
        return "\n".join(self.messages)

    def lines(self, style: Style) -> list[str]:
        """Messages emitted with ``style``, in order."""
        return [o.message for o in self.outputs if o.style == style]

    def has_error(self) -> bool:
        return bool(self.lines(Style.ERROR))

    def has_warning(self) -> bool:
        return bool(self.lines(Style.WARNING))

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]

    def count(self, style: Style) -> int:
        return len(self.lines(style))
