"""Shared CLI helpers."""

import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from ..config import AffectedConfig, load_config
import typer

from ..exceptions import InvalidInputError, InvalidPathError

EXIT_ERRORS = 1
EXIT_INVALID_INPUT = 2
EXIT_INTERRUPTED = 130

# Paths are never broken across lines
console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


def read_path_list(source: str) -> List[str]:
    """Paths listed one per line in ``source`` (``-`` reads stdin).

    Blank lines and lines starting with ``#`` are skipped.

    Raises:
        InvalidPathError: If the list file cannot be read
    """
    if source == "-":
        text = sys.stdin.read()
    else:
        try:
            text = Path(source).read_text(encoding="utf-8")
        except OSError as e:
            raise InvalidPathError(source, f"cannot read path list: {e.strerror or e}")
    paths = []
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            paths.append(line)
    return paths


def resolve_config(
    config: Optional[Path] = None,
    extensions: Optional[List[str]] = None,
    module_dirs: Optional[List[str]] = None,
    root: Optional[Path] = None,
    tsconfig: Optional[Path] = None,
    workers: Optional[int] = None,
    report_cycles: Optional[bool] = None,
    cache: Optional[bool] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> AffectedConfig:
    """Build configuration from CLI options. Unset options defer to files and env."""
    overrides = {}
    if extensions:
        overrides["extensions"] = tuple(extensions)
    if module_dirs:
        overrides["module_directories"] = tuple(module_dirs)
    if root is not None:
        overrides["root_dir"] = str(root)
    if tsconfig is not None:
        overrides["tsconfig"] = str(tsconfig)
    if workers is not None:
        overrides["workers"] = workers
    if report_cycles:
        overrides["report_cycles"] = True
    if cache is not None:
        overrides["cache_enabled"] = cache
    return load_config(config_file=config, verbose=verbose, quiet=quiet, **overrides)


def load_settings(config: Optional[Path] = None) -> AffectedConfig:
    """resolve_config() for commands without engine options; exits 2 on bad config."""
    try:
        return resolve_config(config=config)
    except InvalidInputError as e:
        err_console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(EXIT_INVALID_INPUT)
