"""
Console output for mfdeps commands, built on Rich.

Everything the user is meant to read goes through this module and lands on
stdout: labelled status lines, tables, JSON and the downgrade prompt.
Diagnostics belong to :mod:`mfdeps.utils.logger`, which writes to stderr.

Color is on only when stdout is a terminal and neither ``NO_COLOR`` nor
``CI`` is set. The CLI calls :func:`reconfigure_console` after changing
``NO_COLOR`` for ``--no-color``.
"""

from __future__ import annotations

import os
import sys
import json
import threading
from typing import Any, Dict, List, Mapping, Optional, Sequence

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

MFDEPS_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "highlight": "bold magenta",
    }
)

#: Markup color per change kind reported by ``get_update_type``.
UPDATE_TYPE_COLORS: Dict[str, str] = {
    "major": "red",
    "minor": "yellow",
    "patch": "green",
    "prerelease": "magenta",
    "downgrade": "red",
    "range": "cyan",
}

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError, ValueError):
        return False


def _get_console() -> Console:
    """Return the shared Console, creating it on first use."""
    global _console

    with _console_lock:
        if _console is None:
            use_color = _should_use_color()
            _console = Console(
                theme=MFDEPS_THEME,
                no_color=not use_color,
                highlight=use_color,
            )
        return _console


def reconfigure_console() -> None:
    """Forget the shared Console so the next call picks up the environment."""
    global _console
    with _console_lock:
        _console = None


# ---------------------------------------------------------------------------
# Status lines
# ---------------------------------------------------------------------------


def _status(message: str, style: str, label: Optional[str]) -> None:
    # "\nDone" prints as an empty line followed by "[OK] Done"
    body = message.lstrip("\n")
    lead = message[: len(message) - len(body)]
    text = f"{label} {body}" if label else body
    _get_console().print(f"{lead}{text}", style=style)


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    """Print a success line."""
    _status(message, "success", prefix)


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    """Print an error line."""
    _status(message, "error", prefix)


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    """Print a warning line."""
    _status(message, "warning", prefix)


def print_info(message: str) -> None:
    """Print an unlabelled informational line."""
    _status(message, "info", None)


# ---------------------------------------------------------------------------
# Structured output
# ---------------------------------------------------------------------------


def print_table(
    rows: Sequence[Mapping[str, Any]],
    headers: Sequence[str],
    *,
    title: Optional[str] = None,
    column_styles: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> None:
    """Render ``rows`` as a table with the columns named in ``headers``.

    Cells may contain Rich markup. ``column_styles`` maps a header to
    ``style``, ``justify`` and ``no_wrap`` settings. Nothing is printed
    when ``rows`` is empty.
    """
    if not rows:
        return

    table = Table(title=title, show_header=True, header_style="bold")
    styles = column_styles or {}
    for header in headers:
        config = styles.get(header, {})
        table.add_column(
            header,
            style=config.get("style"),
            justify=config.get("justify", "left"),
            no_wrap=config.get("no_wrap", False),
            overflow="fold",
        )

    for row in rows:
        table.add_row(*(str(row.get(header, "")) for header in headers))

    _get_console().print(table)


def print_json(data: Any) -> None:
    """Print ``data`` as indented JSON, highlighted when color is on."""
    _get_console().print_json(json.dumps(data))


def colorize_update_type(update_type: str) -> str:
    """Wrap an update kind (``major``, ``range``...) in its color markup."""
    color = UPDATE_TYPE_COLORS.get(update_type.lower())
    return f"[{color}]{update_type}[/{color}]" if color else update_type


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------

_YES = ("y", "yes")
_NO = ("n", "no")


def confirm(message: str, *, default: bool = False) -> bool:
    """Ask a yes/no question on stdin.

    Empty or unrecognized answers give ``default``; EOF and Ctrl+C decline
    regardless of ``default``. The prompt blocks without a timeout.
    """
    console = _get_console()
    choices = "[Y/n]" if default else "[y/N]"
    console.print(f"{message} {choices}: ", end="", style="warning", markup=False)

    try:
        answer = input().strip().lower()
    except (KeyboardInterrupt, EOFError):
        console.print()
        return False

    if answer in _YES:
        return True
    if answer in _NO:
        return False
    return default
