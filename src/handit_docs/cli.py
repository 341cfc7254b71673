"""CLI interface for Handit Docs.

Command-line tool for serving and checking the documentation site.
"""

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from handit_docs.config import Config
from handit_docs.core.loader import SiteLoader
from handit_docs.core.meta import MetaError
from handit_docs.core.navigation import NavItem, build_navigation


@click.group()
@click.version_option(package_name="handit-docs")
def cli() -> None:
    """Handit Docs - the Handit.ai documentation server."""


_config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover handit-docs.toml)",
)

_source_dir_option = click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Documentation source directory (overrides config)",
)


@cli.command()
@_config_option
@_source_dir_option
@click.option(
    "--cache-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Cache directory (overrides config)",
)
@click.option("--host", default=None, help="Host to bind to (overrides config)")
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable live reload (overrides config, default: enabled)",
)
def serve(
    config_path: Path | None,
    source_dir: Path | None,
    cache_dir: Path | None,
    host: str | None,
    port: int | None,
    verbose: bool,
    live_reload: bool | None,
) -> None:
    """Start the documentation server."""
    from handit_docs.server import run_server

    _configure_logging(verbose)
    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        source_dir=source_dir,
        cache_dir=cache_dir,
        live_reload_enabled=live_reload,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Source directory: {config.docs.source_dir}")
    click.echo(f"Cache directory: {config.docs.cache_dir}")
    click.echo(f"Landing redirect: / -> {config.redirect.target}")
    if config.live_reload.enabled:
        click.echo("Live reload: enabled")
    else:
        click.echo("Live reload: disabled")

    run_server(config)


@cli.command()
@_config_option
@_source_dir_option
@click.option("--tree", is_flag=True, help="Print the resolved navigation tree")
def check(config_path: Path | None, source_dir: Path | None, tree: bool) -> None:
    """Validate navigation metadata against the content directory.

    Exits with status 1 when a _meta file is malformed or declares a key
    that matches no page or directory.
    """
    _configure_logging(verbose=False, level=logging.ERROR)
    config = _load_config(config_path).with_overrides(source_dir=source_dir)

    source = config.docs.source_dir
    if not source.is_dir():
        _fail(f"Source directory not found: {source}")

    loader = SiteLoader(source)
    try:
        site = loader.load()
    except MetaError as e:
        _fail(str(e))

    if tree:
        for item in build_navigation(site):
            _echo_tree(item, depth=0)

    target = site.get_page(config.redirect.target)
    target_missing = target is None or not target.has_content
    problems = loader.problems()
    for problem in problems:
        click.echo(click.style(f"Error: {problem}", fg="red"), err=True)
    if target_missing:
        click.echo(
            click.style(
                f"Error: landing redirect target {config.redirect.target} has no page",
                fg="red",
            ),
            err=True,
        )

    if problems or target_missing:
        sys.exit(1)

    click.echo(click.style(f"OK: {len(site)} pages", fg="green"))


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


def _echo_tree(item: NavItem, depth: int) -> None:
    click.echo(f"{'  ' * depth}{item.title} ({item.path})")
    for child in item.children:
        _echo_tree(child, depth + 1)


def _configure_logging(verbose: bool, level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    cli()
