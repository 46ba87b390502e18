"""Console output for the eda-sexp command."""

from __future__ import annotations

import sys
import traceback
from typing import TYPE_CHECKING

from rich.markup import escape

from eda_sexp.exceptions import SExpError

if TYPE_CHECKING:
    from rich.console import Console

__all__ = ["get_console", "print_error"]

# stdout and stderr consoles, keyed by "is stderr"
_consoles: dict[bool, Console] = {}


def get_console(stderr: bool = False) -> Console:
    """Return the shared rich console writing to stdout (or stderr)."""
    console = _consoles.get(stderr)
    if console is None:
        from rich.console import Console

        console = _consoles[stderr] = Console(stderr=stderr, highlight=False)
    return console


def print_error(e: Exception, verbose: bool = False) -> None:
    """
    Report a failed command on stderr as ``error: <message>``.

    Document errors already carry their file, position and suggestions in
    ``str(e)``; anything else is shown with its type name. With ``verbose``
    the traceback is printed instead.
    """
    if verbose:
        traceback.print_exc(file=sys.stderr)
        return

    text = str(e) if isinstance(e, SExpError) else f"{type(e).__name__}: {e}"
    console = get_console(stderr=True)
    if console.is_terminal:
        console.print(f"[bold red]error:[/bold red] {escape(text)}")
    else:
        print(f"error: {text}", file=sys.stderr)
