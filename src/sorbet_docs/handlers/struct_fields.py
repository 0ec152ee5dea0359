"""Handler for `T::Struct` field declarations (`const` and `prop`).

Each declaration documents a reader method, registers the attribute in the
namespace's attribute table and records a `FieldRecord` so the constructor
can be synthesised when the class body closes.
"""

import logging
import re
from dataclasses import dataclass

from tree_sitter import Node

from sorbet_docs.code_objects import AttributeSlots, MethodObject
from sorbet_docs.directives import add_directives, extract_directives
from sorbet_docs.handlers.base import HandlerContext
from sorbet_docs.nodes import (
    HASH,
    PAIR,
    call_arguments,
    call_name,
    hash_pairs,
    is_bare_call,
    pairs_by_name,
    positional_arguments,
    symbol_name,
)
from sorbet_docs.state import FieldRecord
from sorbet_docs.types import FALLBACK_TYPE, convert

logger = logging.getLogger(__name__)

_FIELD_CALLS = frozenset({"const", "prop"})
_NAME_NODE_TYPES = frozenset({"simple_symbol", "delimited_symbol", "string", "hash_key_symbol"})
# Identifiers, reserved words (`end`) and constants (`Foo`) are all valid field names
_FIELD_NAME = re.compile(r"^[A-Za-z_]\w*[?!]?$")


@dataclass(frozen=True)
class FieldSyntax:
    """Where a field declaration keeps its type.

    `POSITIONAL` is the Sorbet form. `KEYWORD` (`prop :name, type: Type`) is
    an extension accepted for hand-rolled struct DSLs; Sorbet itself does not
    define it.

    Attributes:
        label: Name used in log messages
        type_index: Argument index holding the type, if positional
        type_keyword: Option holding the type, if keyword based

    """

    label: str
    type_index: int | None = None
    type_keyword: str | None = None

    def type_node(self, node: Node) -> Node | None:
        """Return the type expression of a declaration written in this syntax.

        A braced hash at the type index is a shape type, not options.
        """
        if self.type_index is not None:
            arguments = call_arguments(node)
            if len(arguments) > self.type_index and arguments[self.type_index].type != PAIR:
                return arguments[self.type_index]
            return None
        if self.type_keyword is not None:
            return self.options(node).get(self.type_keyword)
        return None

    def options(self, node: Node) -> dict[str, Node]:
        """Return the declaration's options (`default:`, `immutable:`, ...).

        Options are bare trailing pairs or a hash literal after the type.
        """
        pairs: list[Node] = []
        first_option = (self.type_index or 0) + 1
        for index, argument in enumerate(call_arguments(node)):
            if argument.type == PAIR:
                pairs.append(argument)
            elif argument.type == HASH and index >= first_option:
                pairs.extend(hash_pairs(argument))
        return pairs_by_name(pairs)


POSITIONAL = FieldSyntax(label="positional", type_index=1)
KEYWORD = FieldSyntax(label="keyword", type_keyword="type")


def detect_syntax(node: Node) -> FieldSyntax:
    """Pick the syntax a declaration is written in, preferring the positional form."""
    if POSITIONAL.type_node(node) is None and KEYWORD.type_node(node) is not None:
        return KEYWORD
    return POSITIONAL


def field_name(node: Node) -> str | None:
    """Return the declared field name, or None if the first argument is not a name."""
    positional = positional_arguments(node)
    if not positional or positional[0].type not in _NAME_NODE_TYPES:
        return None
    name = symbol_name(positional[0])
    return name if _FIELD_NAME.match(name) else None


def read_field(node: Node, context: HandlerContext, syntax: FieldSyntax) -> FieldRecord | None:
    """Build the field record for a `const`/`prop` declaration.

    Args:
        node: The declaration call
        context: Handler context of the enclosing namespace
        syntax: Where the declaration keeps its type

    Returns:
        The field record, or None if the declaration has no usable name

    """
    name = field_name(node)
    if name is None:
        logger.debug(
            "Skipping %s without a field name at %s:%d",
            call_name(node),
            context.parsed.file_path,
            context.parsed.line_of(node),
        )
        return None

    type_node = syntax.type_node(node)
    types = convert(type_node) if type_node is not None else [FALLBACK_TYPE]

    keywords = syntax.options(node)
    default_node = keywords.get("default")
    immutable_node = keywords.get("immutable")
    mutable = call_name(node) == "prop" and not (
        immutable_node is not None and context.text(immutable_node) == "true"
    )

    return FieldRecord(
        namespace=context.namespace.path,
        name=name,
        types=tuple(types),
        doc=context.docstring_for(node),
        source=context.text(node),
        default=context.text(default_node) if default_node is not None else None,
        mutable=mutable,
    )


def reader_docstring(record: FieldRecord, context: HandlerContext) -> str:
    """Return the reader docstring: the field's comment plus a `@return` tag."""
    raw = record.doc or f"Returns the value of attribute {context.config.code_span(record.name)}."
    docstring, directives = extract_directives(raw)
    docstring.upsert_tag("return", list(record.types))
    return add_directives(docstring.to_raw(), directives)


class StructFieldHandler:
    """Documents `const :name, Type` and `prop :name, Type` declarations."""

    name = "struct_field"
    namespace_only = True

    def handles(self, node: Node, context: HandlerContext) -> bool:
        """Handle receiver-less `const`/`prop` calls with arguments."""
        return is_bare_call(node, _FIELD_CALLS) and bool(positional_arguments(node))

    def process(self, node: Node, context: HandlerContext) -> None:
        """Record the field and register its reader and attribute slots."""
        syntax = detect_syntax(node)
        record = read_field(node, context, syntax)
        if record is None:
            return

        if context.fields.has_field(record.namespace, record.name):
            if not context.config.allow_duplicate_fields:
                logger.warning(
                    "Skipping duplicate field '%s' in %s at %s:%d",
                    record.name,
                    record.namespace or "(top level)",
                    context.parsed.file_path,
                    context.parsed.line_of(node),
                )
                return
            logger.warning(
                "Duplicate field '%s' in %s; both declarations are documented",
                record.name,
                record.namespace or "(top level)",
            )

        context.fields.append(record)

        reader = MethodObject(
            name=record.name,
            namespace=record.namespace,
            scope=context.scope,
            visibility=context.visibility,
            docstring=reader_docstring(record, context),
            source=record.source,
        )
        context.register(reader, node)

        context.namespace.attributes[context.scope][record.name] = AttributeSlots(
            read=reader.path,
            write=reader.path if record.mutable else None,
        )
        logger.debug("Registered %s field %s (%s)", syntax.label, reader.path, ", ".join(record.types))
