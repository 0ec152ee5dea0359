"""Main entry point for sorbet-docs.

This module provides the command-line interface, with commands for:
- Documenting Ruby sources and listing the documented objects
- Showing the documentation of a single object
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from sorbet_docs.cli import extract_command, show_command

app = typer.Typer(name="sorbet-docs")

_PATHS_ARGUMENT = typer.Argument(
    help="Ruby files or directories to document",
    exists=True,
    file_okay=True,
    dir_okay=True,
    readable=True,
)
_CONFIG_OPTION = typer.Option(
    "--config",
    "-c",
    help="YAML file with the run configuration",
    exists=True,
    file_okay=True,
    dir_okay=False,
    readable=True,
)
_LOG_LEVEL_OPTION = typer.Option(
    "--log-level",
    help="Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    case_sensitive=False,
)


@app.command()
def extract(
    paths: Annotated[list[Path], _PATHS_ARGUMENT],
    config: Annotated[Path | None, _CONFIG_OPTION] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable CLI verbose output (sets log level to DEBUG)",
        ),
    ] = False,
    log_level: Annotated[str, _LOG_LEVEL_OPTION] = "INFO",
) -> None:
    """Document Ruby sources and print the documented objects.

    Example:
        sorbet-docs extract lib/ --config sorbet-docs.yaml -v

    """
    extract_command(paths, config, verbose, log_level)


@app.command()
def show(
    paths: Annotated[list[Path], _PATHS_ARGUMENT],
    object_path: Annotated[
        str,
        typer.Option(
            "--object",
            "-o",
            help="Path of the object to show, e.g. 'Shop::Order#total'",
        ),
    ],
    config: Annotated[Path | None, _CONFIG_OPTION] = None,
    log_level: Annotated[str, _LOG_LEVEL_OPTION] = "INFO",
) -> None:
    """Show the documentation of one object."""
    show_command(paths, object_path, config, log_level)


if __name__ == "__main__":
    app()
