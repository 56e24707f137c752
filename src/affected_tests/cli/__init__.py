"""CLI entry point: registers all subcommands."""

import typer

app = typer.Typer(
    name="affected-tests",
    help="affected-tests - select the test files a change set can break",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit", is_eager=True),
):
    """Select the test entry files whose static import closure contains a changed file."""
    if version:
        from .. import __version__
        from ._common import console

        console.print(f"[bold cyan]affected-tests[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


# Import subcommands to register them
from .affected import run as _run  # noqa: F401, E402
from .cache import cache_clear as _cache_clear, cache_info as _cache_info  # noqa: F401, E402


def main() -> None:
    app()
