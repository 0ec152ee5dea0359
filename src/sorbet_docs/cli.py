"""CLI command implementations for sorbet-docs."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from sorbet_docs.code_objects import (
    ClassObject,
    CodeObject,
    ConstantObject,
    MethodObject,
    NamespaceObject,
)
from sorbet_docs.config import SorbetDocsConfig
from sorbet_docs.errors import SorbetDocsError
from sorbet_docs.logging import setup_logging
from sorbet_docs.processor import DocumentationProcessor
from sorbet_docs.store import DocumentationStore

logger = logging.getLogger(__name__)
console = Console()


class CLIError(Exception):
    """Base exception for CLI-related errors."""

    pass


class DocumentationRunner:
    """Runs the documentation processor for CLI commands."""

    def __init__(self, config_path: Path | None = None) -> None:
        """Load the run configuration.

        Raises:
            CLIError: If the configuration file is invalid

        """
        try:
            self.config = (
                SorbetDocsConfig.from_yaml(config_path) if config_path else SorbetDocsConfig()
            )
        except SorbetDocsError as e:
            raise CLIError(f"Invalid configuration: {e}") from e
        self.processor = DocumentationProcessor(config=self.config)

    def run(self, paths: list[Path]) -> DocumentationStore:
        """Document the given files and directories.

        Raises:
            CLIError: If no file could be documented

        """
        store = self.processor.process_paths(paths)
        self.processor.finish()
        if not self.processor.processed_files:
            raise CLIError(f"No Ruby files documented from: {', '.join(map(str, paths))}")
        return store


class OutputFormatter:
    """Handles formatting CLI output for the documentation store."""

    def format_store(self, store: DocumentationStore, verbose: bool = False) -> None:
        """Print the namespaces of a store as a tree.

        Args:
            store: Populated documentation store
            verbose: Also show the first docstring line of every object

        """
        tree = Tree("[bold blue]Documented objects[/bold blue]")
        self._add_children(tree, store, store.root, verbose)
        console.print(tree)
        console.print(f"\n[green]{len(store)} object(s) documented[/green]")

    def format_object(self, obj: CodeObject) -> None:
        """Print one object's docstring, parameters and source."""
        details = Table(show_header=False, box=None)
        details.add_column("Field", style="bold")
        details.add_column("Value")
        details.add_row("Path", obj.path)
        details.add_row("Kind", _kind(obj))
        if obj.file:
            details.add_row("Defined in", f"{obj.file}:{obj.line}")
        if isinstance(obj, MethodObject):
            details.add_row("Visibility", obj.visibility)
            if obj.parameters:
                details.add_row("Parameters", escape(_signature(obj)))
        if isinstance(obj, ConstantObject):
            details.add_row("Value", escape(obj.value))
        if isinstance(obj, ClassObject) and obj.superclass:
            details.add_row("Superclass", obj.superclass)

        console.print(Panel(details, title=obj.path, border_style="cyan"))
        docstring = escape(obj.docstring) if obj.docstring else "[dim](undocumented)[/dim]"
        console.print(Panel(docstring, title="Docstring", border_style="green"))
        if obj.source:
            console.print(Panel(escape(obj.source), title="Source", border_style="blue"))

    def _add_children(
        self, branch: Tree, store: DocumentationStore, namespace: NamespaceObject, verbose: bool
    ) -> None:
        for child in store.children_of(namespace.path):
            label = f"[cyan]{_kind(child)}[/cyan] {child.path}"
            if verbose and child.docstring:
                label += f" [dim]{escape(child.docstring.splitlines()[0])}[/dim]"
            child_branch = branch.add(label)
            if isinstance(child, NamespaceObject):
                self._add_children(child_branch, store, child, verbose)


def _kind(obj: CodeObject) -> str:
    return getattr(obj, "type", "object")


def _signature(method: MethodObject) -> str:
    parts: list[str] = []
    for name, default in method.parameters:
        if default is None:
            parts.append(name)
        elif name.endswith(":"):
            parts.append(f"{name} {default}")
        else:
            parts.append(f"{name} = {default}")
    return f"{method.name}({', '.join(parts)})"


def setup_cli_logging(log_level: str, verbose: bool = False) -> None:
    """Set up logging for CLI commands.

    Args:
        log_level: Logging level string
        verbose: Override with DEBUG level if True

    """
    effective_log_level = "DEBUG" if verbose else log_level
    setup_logging(level=effective_log_level)


def handle_cli_error(error: Exception, message: str) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        error: The exception that occurred
        message: User-friendly error message

    """
    logger.error("%s: %s", message, error)

    error_panel = Panel(
        f"[red]{escape(str(error))}[/red]", title=f"❌ {message}", border_style="red"
    )
    console.print(error_panel)
    raise typer.Exit(1) from error


def extract_command(
    paths: list[Path],
    config_path: Path | None = None,
    verbose: bool = False,
    log_level: str = "INFO",
) -> None:
    """CLI command implementation for documenting Ruby sources.

    Args:
        paths: Files and directories to document
        config_path: Optional YAML run configuration
        verbose: Enable verbose output
        log_level: Logging level

    """
    setup_cli_logging(log_level, verbose)

    try:
        store = DocumentationRunner(config_path).run(paths)
        OutputFormatter().format_store(store, verbose)
    except CLIError as e:
        handle_cli_error(e, "Documentation failed")


def show_command(
    paths: list[Path],
    object_path: str,
    config_path: Path | None = None,
    log_level: str = "INFO",
) -> None:
    """CLI command implementation for showing one documented object.

    Args:
        paths: Files and directories to document
        object_path: Path of the object to show (e.g. `Foo::Bar#baz`)
        config_path: Optional YAML run configuration
        log_level: Logging level

    """
    setup_cli_logging(log_level)

    try:
        store = DocumentationRunner(config_path).run(paths)
        obj = store.at(object_path)
        if obj is None:
            raise CLIError(f"Object '{object_path}' not found")
        OutputFormatter().format_object(obj)
    except CLIError as e:
        handle_cli_error(e, "Show failed")
