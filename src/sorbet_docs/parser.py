"""Ruby source parser using tree-sitter."""

import logging
from pathlib import Path

import tree_sitter_ruby
from tree_sitter import Language, Node, Parser

from sorbet_docs.errors import ParserError
from sorbet_docs.nodes import COMMENT, find_nodes_by_type, get_node_text

logger = logging.getLogger(__name__)

_RUBY_LANGUAGE = Language(tree_sitter_ruby.language())

# Constants
_DEFAULT_ENCODING = "utf-8"
_DEFAULT_FILE_NAME = "(string)"
_BLOCK_COMMENT_START = "=begin"
_BLOCK_COMMENT_END = "=end"

# Line index offset (tree-sitter uses 0-based, we want 1-based)
LINE_INDEX_OFFSET = 1


class ParsedSource:
    """A parsed Ruby file: syntax tree, source text and attached comments.

    Comments are attached to the statement that starts on the line directly
    below a contiguous block of full-line comments, the way documentation
    comments are written in Ruby.
    """

    def __init__(self, root_node: Node, source_code: str, file_path: str) -> None:
        """Initialise the parsed source and index its comments.

        Args:
            root_node: Root `program` node of the syntax tree
            source_code: Original source code
            file_path: Path the source was read from, used in object metadata

        """
        self.root_node = root_node
        self.source_code = source_code
        self.file_path = file_path
        self._lines = source_code.splitlines()
        self._comments_by_end_row = self._index_comments(root_node)
        self._docstring_overrides: dict[tuple[int, int, str], str] = {}

    @property
    def has_errors(self) -> bool:
        """Return True if tree-sitter had to recover from syntax errors."""
        return self.root_node.has_error

    def line_of(self, node: Node) -> int:
        """Return the 1-based line a node starts on."""
        return node.start_point[0] + LINE_INDEX_OFFSET

    def docstring_for(self, node: Node) -> str:
        """Return the documentation comment attached to a node.

        A docstring set with `override_docstring` takes precedence over the
        comment found in the source.

        Args:
            node: Statement node

        Returns:
            Comment text without comment markers, or an empty string

        """
        override = self._docstring_overrides.get(_node_key(node))
        if override is not None:
            return override

        block: list[Node] = []
        row = node.start_point[0] - 1
        while row in self._comments_by_end_row:
            comment = self._comments_by_end_row[row]
            block.insert(0, comment)
            row = comment.start_point[0] - 1

        lines: list[str] = []
        for comment in block:
            lines.extend(_comment_lines(get_node_text(comment)))
        return "\n".join(lines).strip("\n").rstrip()

    def override_docstring(self, node: Node, docstring: str) -> None:
        """Replace the docstring of a node for the remainder of this file."""
        self._docstring_overrides[_node_key(node)] = docstring

    def _index_comments(self, root_node: Node) -> dict[int, Node]:
        """Map the last row of every full-line comment to its node."""
        index: dict[int, Node] = {}
        for comment in find_nodes_by_type(root_node, COMMENT):
            row, column = comment.start_point[0], comment.start_point[1]
            if row >= len(self._lines):
                continue
            # Trailing comments after code on the same line are not docstrings
            if self._lines[row][:column].strip():
                continue
            end_row = comment.end_point[0]
            # Block comments may end at column 0 of the line after `=end`
            if comment.end_point[1] == 0 and end_row > row:
                end_row -= 1
            index[end_row] = comment
        return index


class RubySourceParser:
    """Parser for Ruby source code using tree-sitter."""

    _SUPPORTED_EXTENSIONS = [".rb", ".rbi"]

    def __init__(self) -> None:
        """Initialise the parser with the tree-sitter Ruby grammar."""
        self.parser = Parser()
        self.parser.language = _RUBY_LANGUAGE

    def parse(self, source_code: str, file_path: str = _DEFAULT_FILE_NAME) -> ParsedSource:
        """Parse source code string.

        Args:
            source_code: Ruby source code to parse
            file_path: Path recorded on the parsed source

        Returns:
            Parsed source with its syntax tree

        Raises:
            ParserError: If tree-sitter rejects the input

        """
        try:
            tree = self.parser.parse(bytes(source_code, _DEFAULT_ENCODING))
        except (TypeError, ValueError) as e:
            raise ParserError(f"Failed to parse {file_path}: {e}") from e

        parsed = ParsedSource(tree.root_node, source_code, file_path)
        if parsed.has_errors:
            logger.warning("Syntax errors in %s, documenting what could be parsed", file_path)
        return parsed

    @staticmethod
    def is_supported_file(file_path: Path, extensions: list[str] | None = None) -> bool:
        """Check if a file extension is one this parser handles.

        Args:
            file_path: Path to check
            extensions: Extensions to accept instead of the defaults

        Returns:
            True if the file extension is supported

        """
        accepted = extensions or RubySourceParser._SUPPORTED_EXTENSIONS
        return file_path.suffix.lower() in accepted


def _node_key(node: Node) -> tuple[int, int, str]:
    return (node.start_byte, node.end_byte, node.type)


def _comment_lines(text: str) -> list[str]:
    """Strip comment markers from a `#` comment or an `=begin`/`=end` block."""
    if text.startswith(_BLOCK_COMMENT_START):
        inner = text.splitlines()[1:]
        if inner and inner[-1].strip().startswith(_BLOCK_COMMENT_END):
            inner = inner[:-1]
        return [line.rstrip() for line in inner]

    line = text.removeprefix("#")
    return [line.removeprefix(" ").rstrip()]
