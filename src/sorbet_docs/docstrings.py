"""Docstring parsing and serialisation.

A raw docstring is free text followed by tags and directives:

    Creates a record.
    @param [String, nil] name the record name
    @return [Record]
    @!visibility private

Tags are lines starting with `@name`; indented lines continue the previous
tag. Directives are lines starting with `@!`; the parser collects them
separately and `Docstring.to_raw()` does not write them back, so callers that
rebuild a docstring must carry them over (see `sorbet_docs.directives`).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_TAG_LINE = re.compile(r"^@(?P<tag>[A-Za-z_]\w*)(?:\s+(?P<rest>.*))?$")
_DIRECTIVE_PREFIX = "@!"

# Tags carrying a type list and a name: `@param [Types] name text`
_NAMED_TYPED_TAGS = frozenset({"attr", "attr_reader", "attr_writer", "option", "param", "yieldparam"})
# Tags carrying a type list only: `@return [Types] text`
_TYPED_TAGS = frozenset({"raise", "return", "yieldreturn"})

_OPENING_BRACKETS = "[<{("
_CLOSING_BRACKETS = "]>})"


@dataclass
class Tag:
    """A docstring tag such as `@param` or `@return`."""

    tag_name: str
    text: str = ""
    types: list[str] | None = None
    name: str | None = None

    def to_raw(self) -> str:
        """Serialise the tag as docstring source."""
        parts = [f"@{self.tag_name}"]
        if self.types is not None:
            parts.append(f"[{', '.join(self.types)}]")
        if self.name:
            parts.append(self.name)
        text_lines = self.text.strip().splitlines()
        if text_lines:
            parts.append(text_lines[0])
        head = " ".join(parts)
        return "\n".join([head, *(f"  {line}" for line in text_lines[1:])])


@dataclass
class Docstring:
    """Parsed docstring: free text, tags and the directives found while parsing."""

    text: str = ""
    tags: list[Tag] = field(default_factory=list)
    directives: list[str] = field(default_factory=list)

    def add_tag(self, tag: Tag) -> None:
        """Append a tag."""
        self.tags.append(tag)

    def tags_named(self, tag_name: str) -> list[Tag]:
        """Return all tags with a tag name, in order."""
        return [tag for tag in self.tags if tag.tag_name == tag_name]

    def tag(self, tag_name: str, name: str | None = None) -> Tag | None:
        """Return the first tag matching a tag name and (optionally) a parameter name."""
        for tag in self.tags:
            if tag.tag_name == tag_name and (name is None or tag.name == name):
                return tag
        return None

    def remove_tags(self, tag_name: str, names: set[str] | None = None) -> None:
        """Remove tags by tag name, limited to the given parameter names if provided."""
        self.tags = [
            tag
            for tag in self.tags
            if not (tag.tag_name == tag_name and (names is None or tag.name in names))
        ]

    def upsert_tag(
        self,
        tag_name: str,
        types: list[str] | None = None,
        name: str | None = None,
    ) -> Tag:
        """Set the types of an existing tag, or add a new tag if there is none.

        The text of an existing tag is kept.
        """
        existing = self.tag(tag_name, name)
        if existing is not None:
            existing.types = types
            return existing
        tag = Tag(tag_name=tag_name, types=types, name=name)
        self.add_tag(tag)
        return tag

    def to_raw(self) -> str:
        """Serialise text and tags (not directives) back into docstring source."""
        sections = [self.text.strip(), "\n".join(tag.to_raw() for tag in self.tags)]
        return "\n".join(section for section in sections if section)


class DocstringParser:
    """Parses raw docstring text into a `Docstring`."""

    def parse(self, content: str) -> Docstring:
        """Parse docstring source.

        Args:
            content: Raw docstring text (comment markers already stripped)

        Returns:
            Parsed docstring

        """
        docstring = Docstring()
        text_lines: list[str] = []
        block: list[str] | None = None
        block_is_directive = False

        def _flush() -> None:
            nonlocal block
            if block is None:
                return
            if block_is_directive:
                docstring.directives.append("\n".join(block))
            else:
                docstring.add_tag(_parse_tag(block))
            block = None

        for line in content.splitlines():
            if line.startswith("@"):
                _flush()
                block = [line.rstrip()]
                block_is_directive = line.startswith(_DIRECTIVE_PREFIX)
            elif block is not None and line[:1].isspace() and line.strip():
                block.append(line.rstrip())
            else:
                _flush()
                text_lines.append(line.rstrip())
        _flush()

        docstring.text = "\n".join(text_lines).strip()
        return docstring


def _parse_tag(lines: list[str]) -> Tag:
    match = _TAG_LINE.match(lines[0])
    if match is None:
        return Tag(tag_name="", text="\n".join(lines))

    tag_name = match.group("tag")
    rest = (match.group("rest") or "").strip()
    continuation = [line.strip() for line in lines[1:]]

    types: list[str] | None = None
    name: str | None = None
    if tag_name in _NAMED_TYPED_TAGS:
        if not rest.startswith("[") and rest:
            # `@param name [Types] text` order
            name, _, rest = rest.partition(" ")
            rest = rest.strip()
        types, rest = _split_types(rest)
        if name is None and rest:
            name, _, rest = rest.partition(" ")
            rest = rest.strip()
    elif tag_name in _TYPED_TAGS:
        types, rest = _split_types(rest)

    text = "\n".join(line for line in [rest, *continuation] if line)
    return Tag(tag_name=tag_name, text=text, types=types, name=name)


def _split_types(text: str) -> tuple[list[str] | None, str]:
    """Split a leading `[A, B<C, D>]` type list off some tag text."""
    if not text.startswith("["):
        return None, text

    depth = 0
    for index, char in enumerate(text):
        if char in _OPENING_BRACKETS:
            depth += 1
        elif char in _CLOSING_BRACKETS and not (char == ">" and text[index - 1] == "="):
            depth -= 1
            if depth == 0:
                return split_type_list(text[1:index]), text[index + 1 :].strip()
    return None, text


def split_type_list(text: str) -> list[str]:
    """Split a comma separated type list, ignoring commas inside brackets.

    Example:
        >>> split_type_list("Hash{String => Integer}, Array<A, B>, nil")
        ['Hash{String => Integer}', 'Array<A, B>', 'nil']

    """
    types: list[str] = []
    depth = 0
    current: list[str] = []
    for index, char in enumerate(text):
        if char in _OPENING_BRACKETS:
            depth += 1
        elif char in _CLOSING_BRACKETS and not (char == ">" and text[index - 1 : index] == "="):
            depth -= 1
        if char == "," and depth == 0:
            types.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    if "".join(current).strip():
        types.append("".join(current).strip())
    return types
