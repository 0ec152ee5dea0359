"""Handler for `sig { ... }` type signatures.

A signature documents the definition that follows it:

    # Adds two numbers
    sig { params(a: Integer, b: T.nilable(Integer)).returns(Integer) }
    def add(a, b = nil); end

becomes

    Adds two numbers
    @param [Integer] a
    @param [Integer, nil] b
    @return [Integer]
"""

import logging

from tree_sitter import Node

from sorbet_docs.directives import add_directives, extract_directives
from sorbet_docs.docstrings import Docstring
from sorbet_docs.errors import NodeNotFoundError
from sorbet_docs.handlers.base import HandlerContext
from sorbet_docs.nodes import (
    CALL,
    METHOD,
    SINGLETON_METHOD,
    bfs_traverse,
    call_arguments,
    call_name,
    get_node_text,
    is_bare_call,
    keyword_arguments,
    positional_arguments,
    resolve_sig_target,
    sibling,
)
from sorbet_docs.types import VOID_TYPE, convert

logger = logging.getLogger(__name__)

_SIG = frozenset({"sig"})


def _is_method_name(node: Node) -> bool:
    """Check if an identifier is the method name of its parent call."""
    parent = node.parent
    if parent is None or parent.type != CALL:
        return False
    method = parent.child_by_field_name("method")
    return method is not None and method.id == node.id


def apply_signature(block: Node, docstring: Docstring) -> None:
    """Upsert the tags described by a signature block into a docstring.

    The block is traversed outermost call first, so `returns` is seen before
    the `params` it is chained to; tags are written params first regardless.
    """
    params: list[tuple[str, list[str]]] = []
    returns: list[str] | None = None
    abstract = False

    def _visit(node: Node) -> None:
        nonlocal returns, abstract
        if node.type == "identifier" and not _is_method_name(node):
            keyword = get_node_text(node)
        elif node.type == CALL:
            keyword = call_name(node) or ""
        else:
            return

        match keyword:
            case "params" if node.type == CALL:
                params.extend(
                    (name, convert(value)) for name, value in keyword_arguments(node).items()
                )
            case "returns" if node.type == CALL:
                arguments = positional_arguments(node) or call_arguments(node)
                returns = convert(arguments[0] if arguments else None)
            case "void":
                returns = [VOID_TYPE]
            case "abstract":
                abstract = True

    bfs_traverse(block, _visit)

    for name, types in params:
        docstring.upsert_tag("param", types, name)
    if returns is not None:
        docstring.upsert_tag("return", returns)
    if abstract:
        docstring.upsert_tag("abstract")


class SigHandler:
    """Turns signatures into `@param`, `@return` and `@abstract` tags."""

    name = "sig"
    namespace_only = True

    def handles(self, node: Node, context: HandlerContext) -> bool:
        """Handle `sig` calls with a block."""
        return is_bare_call(node, _SIG) and node.child_by_field_name("block") is not None

    def process(self, node: Node, context: HandlerContext) -> None:
        """Attach the signature's tags to the docstring of the following definition."""
        try:
            following = sibling(node)
            target = resolve_sig_target(following)
        except NodeNotFoundError as e:
            logger.warning(
                "Signature at %s:%d does not precede a definition: %s",
                context.parsed.file_path,
                context.parsed.line_of(node),
                e,
            )
            return

        raw = (
            context.docstring_for(node)
            or context.docstring_for(following)
            or context.docstring_for(target)
        )
        docstring, directives = extract_directives(raw)
        block = node.child_by_field_name("block")
        if block is not None:
            apply_signature(block, docstring)
        result = add_directives(docstring.to_raw(), directives)

        context.parsed.override_docstring(target, result)
        self._update_registered(target, result, context)

    def _update_registered(self, target: Node, docstring: str, context: HandlerContext) -> None:
        """Update a method registered before its signature was seen."""
        if target.type not in (METHOD, SINGLETON_METHOD):
            return
        name_node = target.child_by_field_name("name")
        if name_node is None:
            return
        scope = "class" if target.type == SINGLETON_METHOD else context.scope
        method = context.store.find_or_create_method(
            context.namespace.path, context.text(name_node), scope
        )
        if method.path in context.store and method.line == context.parsed.line_of(target):
            method.docstring = docstring
