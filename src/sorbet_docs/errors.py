"""Error classes for sorbet-docs.

This module provides:
- SorbetDocsError: Base exception class for all package errors
- ConfigError: Invalid configuration
- ParserError, SourceReadError: Parsing and file access failures
- NodeNotFoundError: An expected syntax node is missing
- ObjectNotFoundError: A documentation object is not in the store
"""


class SorbetDocsError(Exception):
    """Base exception for all sorbet-docs errors."""

    pass


class ConfigError(SorbetDocsError):
    """Raised when configuration is invalid."""

    pass


class ParserError(SorbetDocsError):
    """Raised when source code cannot be parsed."""

    pass


class SourceReadError(SorbetDocsError):
    """Raised when a source file cannot be read."""

    pass


class NodeNotFoundError(SorbetDocsError, LookupError):
    """Raised when an adjacent or enclosing syntax node does not exist.

    Callers that look up siblings or signature targets treat this as
    "no such node", not as a data problem.
    """

    pass


class ObjectNotFoundError(SorbetDocsError, LookupError):
    """Raised when a documentation object path is not registered."""

    pass
