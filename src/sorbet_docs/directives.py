"""Carry docstring directives across docstring rewrites.

Directives (`@!visibility private`, `@!macro ...`) are not part of a parsed
docstring's tags. Rebuilding a docstring from its parsed form would lose
them, so they are extracted from the raw text first and appended again
afterwards.
"""

from sorbet_docs.docstrings import Docstring, DocstringParser


def extract_directives(docstring: str) -> tuple[Docstring, list[str]]:
    """Parse a raw docstring and return it together with its directives.

    Args:
        docstring: Raw docstring text

    Returns:
        Tuple of (parsed docstring without directives, directive source blocks)

    """
    parsed = DocstringParser().parse(docstring)
    directives = list(parsed.directives)
    parsed.directives.clear()
    return parsed, directives


def add_directives(docstring: str, directives: list[str]) -> str:
    """Append directive source blocks to a raw docstring."""
    return "\n".join(part for part in [docstring, *directives] if part)
