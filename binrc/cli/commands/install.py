from __future__ import annotations

import typer

from binrc.cli.context import build_cache, build_context
from binrc.core.result import Err
from binrc.output.errors import cache_error_exit_code, print_cache_error


def install(
    project: str = typer.Argument(..., help="Project as owner/name, or an alias like 'hugo'."),
    version: str = typer.Argument(
        "",
        help="Release version (v prefix optional). Defaults to $<NAME>_VERSION.",
    ),
    cache_path: str | None = typer.Option(
        None,
        "--cache-path",
        "-c",
        envvar="BINRC_CACHE_PATH",
        help="Cache store root; relative paths live under $HOME. Default: ~/.binrc",
    ),
) -> None:
    """Install a release binary if missing and print its path."""
    ctx = build_context(cache_path)
    cache = build_cache(ctx)

    result = cache.get_or_install(project, version)
    if isinstance(result, Err):
        print_cache_error(result.error, ctx.console)
        raise typer.Exit(code=cache_error_exit_code(result.error))

    typer.echo(str(result.value.path))
