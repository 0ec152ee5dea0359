"""Shared fixtures for sorbet-docs tests."""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest
from tree_sitter import Node

from sorbet_docs.config import SorbetDocsConfig
from sorbet_docs.parser import ParsedSource, RubySourceParser
from sorbet_docs.processor import DocumentationProcessor
from sorbet_docs.store import DocumentationStore

DATA_DIR = Path(__file__).parent / "sorbet_docs" / "data"


@pytest.fixture
def data_dir() -> Path:
    """Directory holding the Ruby fixture files."""
    return DATA_DIR


@pytest.fixture
def parser() -> RubySourceParser:
    """A fresh Ruby parser."""
    return RubySourceParser()


@pytest.fixture
def parse(parser: RubySourceParser) -> Callable[[str], ParsedSource]:
    """Parse a Ruby snippet."""
    return parser.parse


@pytest.fixture
def first_statement(parser: RubySourceParser) -> Callable[[str], Node]:
    """Parse a Ruby snippet and return its first top-level statement."""

    def _first_statement(source: str) -> Node:
        parsed = parser.parse(source)
        statements = [
            child for child in parsed.root_node.named_children if child.type != "comment"
        ]
        assert statements, f"No statement in {source!r}"
        return statements[0]

    return _first_statement


@pytest.fixture
def processor() -> DocumentationProcessor:
    """A processor with the default configuration and handlers."""
    return DocumentationProcessor()


@pytest.fixture
def document() -> Callable[..., DocumentationStore]:
    """Document Ruby snippets with a fresh processor and return the store."""

    def _document(*sources: str, **config: object) -> DocumentationStore:
        processor = DocumentationProcessor(config=SorbetDocsConfig.from_properties(config))
        for index, source in enumerate(sources):
            processor.process_source(source, f"snippet_{index}.rb")
        return processor.store

    return _document


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo logging configuration applied by a test.

    `setup_logging` stops the package logger from propagating, which would
    hide its records from `caplog` in later tests.
    """
    package_logger = logging.getLogger("sorbet_docs")
    root_logger = logging.getLogger()
    saved = (
        package_logger.level,
        package_logger.propagate,
        list(package_logger.handlers),
        root_logger.level,
        list(root_logger.handlers),
    )

    yield

    package_logger.setLevel(saved[0])
    package_logger.propagate = saved[1]
    package_logger.handlers = saved[2]
    root_logger.setLevel(saved[3])
    root_logger.handlers = saved[4]
