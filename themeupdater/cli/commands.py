"""themeupdater commands: check, info, fix-source, cache clear."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer

from themeupdater.cache import CacheStore, FileCacheStore
from themeupdater.config import ConfigLoadError, UpdaterConfig, load_config
from themeupdater.exceptions import RenameFailedError
from themeupdater.fixup import SourceDirectoryFixup
from themeupdater.index_client import RemoteIndexClient
from themeupdater.packages import StaticPackageSource, ThemeDirectorySource
from themeupdater.registry import UpdateRegistry
from themeupdater.resolver import UpdateResolver


def _echo(message: str, *, color: str | None = None, err: bool = False) -> None:
    typer.secho(message, fg=color, err=err)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(config_path: str, no_cache: bool) -> UpdaterConfig:
    overrides = {"cache_enabled": False} if no_cache else {}
    try:
        return load_config(config_path or None, **overrides)
    except ConfigLoadError as exc:
        _echo(str(exc), color="red", err=True)
        raise typer.Exit(2) from exc


def _create_index_client(config: UpdaterConfig, cache: CacheStore) -> RemoteIndexClient:
    return RemoteIndexClient(config, cache)


def _create_resolver(config: UpdaterConfig, cache_dir: str, themes_dir: str | None) -> UpdateResolver:
    cache = FileCacheStore(Path(cache_dir).resolve())
    packages = ThemeDirectorySource(Path(themes_dir).resolve()) if themes_dir else StaticPackageSource([])
    index_client = _create_index_client(config, cache)
    return UpdateResolver(
        config,
        cache,
        packages,
        index_client=index_client,
        registry=UpdateRegistry(index_client),
    )


def check_command(
    themes_dir: str = typer.Option("./themes", "--themes-dir", help="Directory holding installed themes."),
    force: bool = typer.Option(False, "--force", help="Drop cached index data before checking."),
    cache_dir: str = typer.Option("./.themeupdater-cache", "--cache-dir", help="Cache directory."),
    config: str = typer.Option("", "--config", help="Path to themeupdater.yaml."),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the cache entirely."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    """Check installed themes for newer releases."""
    _configure_logging(verbose)
    resolver = _create_resolver(_load_config(config, no_cache), cache_dir, themes_dir)
    # scan the themes directory once for both the pass and the report
    packages = resolver.packages.installed_packages()
    resolver.packages = StaticPackageSource(packages)
    registry = resolver.run(force_invalidate=force)
    installed = {package.slug: package.installed_version for package in packages}
    updates = registry.has_updates(installed)
    if not updates:
        _echo("All themes are up to date.", color="green")
        return
    for slug, summary in sorted(updates.items()):
        _echo(f"{slug}: {installed[slug]} -> {summary.new_version}", color="yellow")
        if summary.artifact_url:
            _echo(f"  package: {summary.artifact_url}", color="blue")


def info_command(
    slug: str = typer.Argument(..., help="Theme slug."),
    cache_dir: str = typer.Option("./.themeupdater-cache", "--cache-dir", help="Cache directory."),
    config: str = typer.Option("", "--config", help="Path to themeupdater.yaml."),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the cache entirely."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    """Print index metadata for one theme as JSON."""
    _configure_logging(verbose)
    resolver = _create_resolver(_load_config(config, no_cache), cache_dir, None)
    detail = resolver.registry.get_detail(slug)
    if detail is None:
        _echo(f"No index entry found for {slug}.", color="red", err=True)
        raise typer.Exit(1)
    _echo(json.dumps(detail.to_dict(), ensure_ascii=False, indent=2))


def fix_source_command(
    source: str = typer.Argument(..., help="Extracted source directory."),
    parent: str = typer.Argument(..., help="Directory the archive was extracted into."),
    slug: str = typer.Argument(..., help="Theme slug the directory must match."),
) -> None:
    """Rename an extracted update directory to the theme slug."""
    try:
        fixed = SourceDirectoryFixup().fix(source, parent, slug)
    except RenameFailedError as exc:
        _echo(str(exc), color="red", err=True)
        raise typer.Exit(1) from exc
    _echo(str(fixed))


def cache_clear_command(
    cache_dir: str = typer.Option("./.themeupdater-cache", "--cache-dir", help="Cache directory."),
    config: str = typer.Option("", "--config", help="Path to themeupdater.yaml."),
) -> None:
    """Delete every cached index entry for themes."""
    resolver = _create_resolver(_load_config(config, False), cache_dir, None)
    removed = resolver.invalidate_all()
    _echo(f"Removed {removed} cache entries.", color="green")
