"""Main command: compute and print the affected test set."""

import os
from pathlib import Path
from typing import List, Optional

import click
import typer

from ..api import get_affected
from ..exceptions import AffectedTestsError, ComputationCancelled, InvalidInputError
from ..formatters import get_formatter
from ..logging_config import setup_logging
from . import app
from ._common import (
    EXIT_ERRORS,
    EXIT_INTERRUPTED,
    EXIT_INVALID_INPUT,
    err_console,
    read_path_list,
    resolve_config,
)


@app.command()
def run(
    tests: Optional[List[str]] = typer.Argument(
        None,
        help="Test entry files",
        show_default=False,
    ),
    changed: Optional[List[str]] = typer.Option(
        None,
        "--changed",
        "-c",
        help="Changed file (repeatable); need not exist any more",
    ),
    tests_from: Optional[str] = typer.Option(
        None,
        "--tests-from",
        help="File listing test entries, one per line ('-' for stdin)",
    ),
    changed_from: Optional[str] = typer.Option(
        None,
        "--changed-from",
        help="File listing changed files, one per line ('-' for stdin)",
    ),
    extension: Optional[List[str]] = typer.Option(
        None,
        "--extension",
        "-e",
        help="Extension tried for extensionless specifiers (repeatable, ordered)",
    ),
    module_dir: Optional[List[str]] = typer.Option(
        None,
        "--module-dir",
        "-m",
        help="Directory searched for bare specifiers (repeatable, ordered)",
    ),
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        "-r",
        help="Project root bounding upward module-directory search",
        file_okay=False,
        dir_okay=True,
    ),
    tsconfig: Optional[Path] = typer.Option(
        None,
        "--tsconfig",
        help="tsconfig.json whose baseUrl/paths apply",
        dir_okay=False,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    output_format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format",
        click_type=click.Choice(["rich", "json", "paths"], case_sensitive=False),
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Parallel scan workers",
        min=1,
        max=64,
    ),
    report_cycles: bool = typer.Option(
        False,
        "--report-cycles",
        help="Report import cycles as informational errors",
    ),
    cache: Optional[bool] = typer.Option(
        None,
        "--cache/--no-cache",
        help="Reuse per-file scan results between runs",
        show_default=False,
    ),
    fail_on_errors: bool = typer.Option(
        False,
        "--fail-on-errors",
        help="Exit 1 if any resolution error was collected",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Errors-only logging"),
):
    """
    Print the test files affected by a set of changed files.

    A test is affected when it imports a changed file directly or
    transitively, or is itself changed.

    [bold cyan]Examples:[/bold cyan]

      affected-tests run src/a.spec.js src/b.spec.js -c src/util.js

      git diff --name-only main | affected-tests run --tests-from tests.txt --changed-from - -f paths

      affected-tests run $(find src -name '*.spec.ts') -c src/api.ts -e .ts -e .js --format json
    """
    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        settings = resolve_config(
            config=config,
            extensions=extension,
            module_dirs=module_dir,
            root=root,
            tsconfig=tsconfig,
            workers=workers,
            report_cycles=report_cycles,
            cache=cache,
            verbose=verbose,
            quiet=quiet,
        )

        entries = list(tests or [])
        if tests_from:
            entries.extend(read_path_list(tests_from))
        changed_files = list(changed or [])
        if changed_from:
            changed_files.extend(read_path_list(changed_from))

        result = get_affected(entries, changed_files, config=settings)

        formatter = get_formatter(output_format.lower())
        formatter.render(result, root=os.path.realpath(settings.resolver.root_dir))

        if fail_on_errors and result.errors:
            err_console.print(
                f"[red]--fail-on-errors:[/red] {len(result.errors)} error(s) collected"
            )
            raise typer.Exit(EXIT_ERRORS)

    except typer.Exit:
        raise

    except InvalidInputError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Invalid input:[/red] {e}")
        raise typer.Exit(EXIT_INVALID_INPUT)

    except ComputationCancelled as e:
        err_console.print(f"[yellow]Cancelled[/yellow] after {e.visited} module(s)")
        raise typer.Exit(EXIT_INTERRUPTED)

    except AffectedTestsError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_ERRORS)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        err_console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(EXIT_INTERRUPTED)
