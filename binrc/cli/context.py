from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from binrc.cache.cache import Cache
from binrc.cache.http import HttpClient, RealHttpClient
from binrc.cache.project import ProjectResolver
from binrc.cache.store import CacheStore
from binrc.cache.templates import Catalog, bundled_catalog_path, load_catalog
from binrc.core.config import Config, load_config_or_default
from binrc.core.errors import ErrorCode
from binrc.core.result import Err
from binrc.output.console import ConsoleProtocol, RichConsole
from binrc.output.errors import print_config_error
from binrc.platform.paths import store_root, user_config_dir, user_config_file


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    catalog: Catalog
    store_root: Path
    console: ConsoleProtocol


def _user_catalog_path(value: str) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = user_config_dir() / path
    return path


def build_context(
    cache_path: str | None = None,
    console: ConsoleProtocol | None = None,
) -> CLIContext:
    console = console or RichConsole()

    config_result = load_config_or_default(user_config_file())
    if isinstance(config_result, Err):
        print_config_error(config_result.error, console)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))
    config = config_result.value

    catalog_result = load_catalog(bundled_catalog_path())
    if isinstance(catalog_result, Err):
        print_config_error(catalog_result.error, console)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))
    catalog = catalog_result.value

    if config.templates:
        user_result = load_catalog(_user_catalog_path(config.templates))
        if isinstance(user_result, Err):
            print_config_error(user_result.error, console)
            raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))
        catalog = catalog.merged(user_result.value)

    return CLIContext(
        config=config,
        catalog=catalog,
        store_root=store_root(cache_path or config.store_path),
        console=console,
    )


def build_cache(ctx: CLIContext, http: HttpClient | None = None) -> Cache:
    resolver = ProjectResolver(ctx.catalog.templates, ctx.catalog.aliases)
    return Cache(
        CacheStore(ctx.store_root),
        resolver,
        http or RealHttpClient(),
        release_host=ctx.config.release_host,
        console=ctx.console,
    )
