from __future__ import annotations

import typer

from binrc import __version__
from binrc.cli.commands.install import install
from binrc.cli.commands.version import version


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Manage pinned versions of binaries published on GitHub releases.",
)


# Commands
app.command()(install)
app.command()(version)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    show_version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    pass


def main() -> None:
    app()
