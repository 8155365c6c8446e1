"""CLI tools: themeupdater check, info, fix-source and cache clear."""

import sys
from importlib import metadata

import typer

from themeupdater.cli.commands import (
    cache_clear_command,
    check_command,
    fix_source_command,
    info_command,
)

app = typer.Typer(
    name="themeupdater",
    help="Resolve theme updates against a remote package index.",
)

cache_app = typer.Typer(name="cache", help="Manage cached index data.")
cache_app.command("clear")(cache_clear_command)

app.command("check")(check_command)
app.command("info")(info_command)
app.command("fix-source")(fix_source_command)
app.add_typer(cache_app, name="cache")


def installed_version() -> str:
    try:
        return metadata.version("themeupdater")
    except metadata.PackageNotFoundError:
        return "unknown"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"themeupdater {installed_version()}")
        raise typer.Exit()


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the installed themeupdater version and exit.",
    ),
) -> None:
    """Resolve theme updates against a remote package index."""


def main() -> None:
    """CLI entry point."""
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(130)


__all__ = ["app", "cache_app", "main"]
