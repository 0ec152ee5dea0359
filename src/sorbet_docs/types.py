"""Conversion of Sorbet type expressions into documentation type strings.

The converter walks the shape of the type expression's syntax tree rather
than its text. It never raises: shapes it does not recognise become
`Object`, so a malformed signature only loses precision.

Examples (Sorbet -> documentation types):
    String                      -> ["String"]
    T.nilable(String)           -> ["String", "nil"]
    T.any(Integer, Float)       -> ["Integer", "Float"]
    T::Array[String]            -> ["Array<String>"]
    T::Hash[Symbol, Integer]    -> ["Hash{Symbol => Integer}"]
    [String, Integer]           -> ["Array(String, Integer)"]
    T.untyped                   -> ["Object"]
"""

import logging
import re

from tree_sitter import Node

from sorbet_docs.nodes import CALL, COMMENT, PAIR, call_arguments, call_name, get_node_text

logger = logging.getLogger(__name__)

FALLBACK_TYPE = "Object"
NIL_TYPE = "nil"
VOID_TYPE = "void"

# YARD conventions for singleton types
_REFERENCE_ALIASES = {
    "T::Boolean": "Boolean",
    "FalseClass": "false",
    "NilClass": "nil",
    "TrueClass": "true",
}

_ARRAY_LIKE_CONTAINERS = frozenset(
    {"T::Array", "T::Class", "T::Enumerable", "T::Enumerator", "T::Range", "T::Set"}
)
_HASH_CONTAINER = "T::Hash"

# `T.<method>` calls rendered with their own source text
_VERBATIM_T_METHODS = frozenset(
    {"all", "attached_class", "enum", "self_type", "type_parameter"}
)

_T_RECEIVERS = frozenset({"T", "::T"})
_WHITESPACE_RUN = re.compile(r"\n\s*")
_ALL_WHITESPACE = re.compile(r"\s+")


def convert(node: Node | None) -> list[str]:
    """Convert a type expression node into documentation type strings.

    Args:
        node: Type expression node, or None when no type was given

    Returns:
        Ordered list of type strings; never empty

    """
    if node is None:
        return [FALLBACK_TYPE]
    return [_WHITESPACE_RUN.sub(" ", type_string) for type_string in _convert_node(node)]


def _convert_node(node: Node) -> list[str]:
    match node.type:
        case "constant" | "scope_resolution":
            return [_convert_reference(node)]
        case "call":
            return _convert_call(node)
        case "element_reference":
            return [_convert_generic(node)]
        case "array":
            return [_convert_tuple(node)]
        case "hash":
            return [_convert_shape(node)]
        case "parenthesized_statements" | "parenthesized_expression":
            inner = _named_children(node)
            if len(inner) == 1:
                return _convert_node(inner[0])
        case "nil":
            return [NIL_TYPE]
        case "true" | "false":
            return [node.type]

    logger.warning(
        "Unsupported type expression '%s' (%s) at line %d",
        get_node_text(node),
        node.type,
        node.start_point[0] + 1,
    )
    return [FALLBACK_TYPE]


def _convert_reference(node: Node) -> str:
    name = _ALL_WHITESPACE.sub("", get_node_text(node))
    return _REFERENCE_ALIASES.get(name, name)


def _convert_call(node: Node) -> list[str]:
    if _is_proc_chain(node):
        return ["Proc"]

    receiver = node.child_by_field_name("receiver")
    if receiver is None or get_node_text(receiver) not in _T_RECEIVERS:
        logger.warning("Unsupported type call '%s'", get_node_text(node))
        return [FALLBACK_TYPE]

    method = call_name(node)
    arguments = call_arguments(node)
    match method:
        case "nilable" if arguments:
            # `nil` goes last so the renderer can show a compact optional marker
            return [*_convert_node(arguments[0]), NIL_TYPE]
        case "any" if arguments:
            return [type_string for arg in arguments for type_string in _convert_node(arg)]
        case "untyped":
            return [FALLBACK_TYPE]
        case "noreturn":
            return [VOID_TYPE]
        case "class_of" if arguments:
            return [f"T.class_of({_convert_reference(arguments[0])})"]
        case _ if method in _VERBATIM_T_METHODS:
            return [_ALL_WHITESPACE.sub(" ", get_node_text(node))]

    logger.warning("Unsupported T method '%s'", get_node_text(node))
    return [FALLBACK_TYPE]


def _is_proc_chain(node: Node) -> bool:
    """Check if a call chain starts with `T.proc`."""
    current: Node | None = node
    while current is not None and current.type == CALL:
        receiver = current.child_by_field_name("receiver")
        if (
            receiver is not None
            and get_node_text(receiver) in _T_RECEIVERS
            and call_name(current) == "proc"
        ):
            return True
        current = receiver
    return False


def _convert_generic(node: Node) -> str:
    container_node = node.child_by_field_name("object")
    if container_node is None:
        return FALLBACK_TYPE
    container = _ALL_WHITESPACE.sub("", get_node_text(container_node))
    members = [
        child for child in _named_children(node) if child.id != container_node.id
    ]
    if not members:
        return container

    if container in _ARRAY_LIKE_CONTAINERS:
        collection = container.split("::")[-1]
        return f"{collection}<{', '.join(_convert_node(members[0]))}>"

    if container == _HASH_CONTAINER and len(members) == 2:
        key_type = ", ".join(_convert_node(members[0]))
        value_type = ", ".join(_convert_node(members[1]))
        return f"Hash{{{key_type} => {value_type}}}"

    member_types = [", ".join(_convert_node(member)) for member in members]
    return f"{container}<{', '.join(member_types)}>"


def _convert_tuple(node: Node) -> str:
    sequence: list[str] = []
    for member in _named_children(node):
        member_types = _convert_node(member)
        if len(member_types) == 1:
            sequence.append(member_types[0])
        else:
            sequence.append(f"[{', '.join(member_types)}]")
    return f"Array({', '.join(sequence)})"


def _convert_shape(node: Node) -> str:
    key_types: list[str] = []
    value_types: list[str] = []
    for pair in _named_children(node):
        if pair.type != PAIR:
            continue
        key = pair.child_by_field_name("key")
        value = pair.child_by_field_name("value")
        if key is None or value is None:
            continue
        key_type = _shape_key_type(key)
        if key_type not in key_types:
            key_types.append(key_type)
        for value_type in _convert_node(value):
            if value_type not in value_types:
                value_types.append(value_type)

    if not value_types:
        return "Hash"
    return f"Hash{{{', '.join(key_types)} => {', '.join(value_types)}}}"


def _shape_key_type(key: Node) -> str:
    match key.type:
        case "hash_key_symbol" | "simple_symbol" | "delimited_symbol":
            return "Symbol"
        case "string":
            return "String"
        case _:
            return ", ".join(_convert_node(key))


def _named_children(node: Node) -> list[Node]:
    return [child for child in node.named_children if child.type != COMMENT]
