"""Themed console output built on rich: status indicators and value formatting."""

from pathlib import Path
from typing import List, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

INDENT = "  "

_THEME = Theme(
    {
        "status.info": "cyan",
        "status.warning": "yellow",
        "status.error": "bold red",
        "status.updated": "green",
        "status.unchanged": "dim",
        "status.saved": "bold green",
        "value.old": "red",
        "value.new": "green",
        "count": "bold cyan",
        "file": "bold",
        "darktext": "grey50",
    }
)

# label, style key
_STATUS_LABELS = {
    "info": ("INFO", "status.info"),
    "warning": ("WARNING", "status.warning"),
    "error": ("ERROR", "status.error"),
    "updated": ("UPDATED", "status.updated"),
    "unchanged": ("UNCHANGED", "status.unchanged"),
    "saved": ("SAVED", "status.saved"),
}

_console: Optional[Console] = None
_error_console: Optional[Console] = None


def get_console() -> Console:
    """Return the shared stdout console."""
    global _console
    if _console is None:
        _console = Console(theme=_THEME, highlight=False)
    return _console


def get_error_console() -> Console:
    """Return the shared stderr console used for errors and tracebacks."""
    global _error_console
    if _error_console is None:
        _error_console = Console(theme=_THEME, highlight=False, stderr=True)
    return _error_console


def emit(message: str = "", console: Optional[Console] = None) -> None:
    (console or get_console()).print(message)


def fmt_change(old: str, new: str) -> str:
    if old == new:
        return f"[value.new]{escape(new)}[/value.new]"
    return f"[value.old]{escape(old)}[/value.old] → [value.new]{escape(new)}[/value.new]"


def fmt_file(path: str, filename_only: bool = True) -> str:
    shown = Path(path).name if filename_only else str(path)
    return f"[file]{escape(shown)}[/file]"


def fmt_bytes(size: int) -> str:
    return f"[count]{size:,}[/count] bytes"


class StatusIndicator:
    """Builder for a single status line plus indented detail items.

    Usage:
        StatusIndicator("updated").add_file(path).add_message("...").emit(console)
    """

    def __init__(self, status: str):
        if status not in _STATUS_LABELS:
            raise ValueError(f"Unknown status: {status}")
        self.status = status
        self._file: Optional[str] = None
        self._messages: List[str] = []
        self._items: List[Tuple[str, int]] = []

    def add_file(self, path: str, filename_only: bool = True) -> "StatusIndicator":
        self._file = fmt_file(path, filename_only=filename_only)
        return self

    def add_message(self, message: str) -> "StatusIndicator":
        self._messages.append(message)
        return self

    def add_item(self, text: str, indent_level: int = 1) -> "StatusIndicator":
        self._items.append((text, indent_level))
        return self

    def build(self) -> str:
        label, style = _STATUS_LABELS[self.status]
        head = [f"[{style}]{label}[/{style}]"]
        if self._file:
            head.append(self._file)
        head.extend(self._messages)
        lines = [" ".join(head)]
        for text, level in self._items:
            lines.append(f"{INDENT * (level + 1)}{text}")
        return "\n".join(lines)

    def emit(self, console: Optional[Console] = None) -> None:
        emit(self.build(), console=console)
