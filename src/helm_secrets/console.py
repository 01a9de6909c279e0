"""Operator-facing terminal output.

Every message goes through one themed rich Console bound to standard
error, so ``view`` and forwarded helm output own stdout. Messages are
prefixed with a symbol per kind; paths are emphasized with ``highlight``.
"""

import shlex
from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)
from rich.text import Text
from rich.theme import Theme

_THEME = Theme(
    {
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red bold",
        "highlight": "cyan bold",
        "muted": "dim",
    }
)

# kind -> (style, symbol)
_PREFIXES = {
    "info": ("info", "ℹ"),
    "success": ("success", "✓"),
    "warning": ("warning", "⚠"),
    "error": ("error", "✗"),
    "action": ("info", "→"),
    "step": ("muted", "•"),
}

console = Console(theme=_THEME, stderr=True)


def _emit(kind: str, message: str) -> None:
    style, symbol = _PREFIXES[kind]
    console.print(f"[{style}]{symbol}[/{style}] {message}")


def info(message: str) -> None:
    """Print an informational message, e.g. a hint about the next command."""
    _emit("info", message)


def success(message: str) -> None:
    """Print the outcome of a completed operation."""
    _emit("success", message)


def warning(message: str) -> None:
    """Print a problem that does not stop the current operation.

    Cleanup failures after helm has run are reported this way so they
    never replace helm's exit status.
    """
    _emit("warning", message)


def error(message: str) -> None:
    """Print a fatal error; the caller decides the exit status."""
    _emit("error", message)


def action(message: str) -> None:
    _emit("action", message)


def step(message: str) -> None:
    _emit("step", message)


def highlight(text: str) -> str:
    """Wrap text (usually a path) in highlight markup."""
    return f"[highlight]{text}[/highlight]"


def command_panel(title: str, argv: Sequence[str]) -> None:
    """Show a resolved command line before it runs.

    Args:
        title: Panel title, e.g. ``helm upgrade``.
        argv: The full argument vector, shell-quoted for display.

    """
    # Text() keeps brackets in --set values from being read as markup
    command = Text(shlex.join(argv), style="bold")
    console.print(Panel(command, title=f"[bold]{title}[/bold]", border_style="cyan", expand=False))


def create_download_progress() -> Progress:
    """Build the progress bar shown while a sops release downloads."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        TimeRemainingColumn(),
        console=console,
    )
