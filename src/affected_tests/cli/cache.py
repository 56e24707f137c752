"""Cache management commands."""

import os
from pathlib import Path
from typing import Optional

import typer

from . import app
from ._common import console, load_settings


def _config_option() -> Optional[Path]:
    return typer.Option(
        None,
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    )


@app.command()
def cache_info(config: Optional[Path] = _config_option()):
    """Show scan cache information and statistics."""
    from ..cache import ScanCache

    settings = load_settings(config)

    console.print("[bold cyan]affected-tests cache info[/bold cyan]")
    console.print()
    console.print(f"Enabled by config: {'[green]yes[/green]' if settings.cache_enabled else '[red]no[/red]'}")

    if not os.path.isdir(settings.cache_dir):
        console.print(f"Directory: [blue]{settings.cache_dir}[/blue] [dim](not created)[/dim]")
        return

    with ScanCache(settings.cache_dir, settings.cache_ttl_hours) as cache:
        stats = cache.stats()

    console.print(f"Directory: [blue]{stats.get('directory', settings.cache_dir)}[/blue]")
    console.print(f"Entries: [yellow]{stats.get('size', 0)}[/yellow]")
    console.print(f"Size: [yellow]{stats.get('volume', 0)} bytes[/yellow]")
    console.print(f"TTL: [yellow]{settings.cache_ttl_hours}h[/yellow]")


@app.command()
def cache_clear(config: Optional[Path] = _config_option()):
    """Clear the scan cache."""
    from ..cache import ScanCache

    settings = load_settings(config)

    if not os.path.isdir(settings.cache_dir):
        console.print("[yellow]No cache to clear[/yellow]")
        raise typer.Exit(0)

    with ScanCache(settings.cache_dir, settings.cache_ttl_hours) as cache:
        cache.clear()
    console.print("[green]Cache cleared successfully[/green]")
