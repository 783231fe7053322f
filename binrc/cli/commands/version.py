from __future__ import annotations

import typer

from binrc import __version__


def version() -> None:
    """Print the binrc version."""
    typer.echo(f"binrc {__version__}")
