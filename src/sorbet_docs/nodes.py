"""Utility functions for tree-sitter Ruby syntax trees.

These helpers read node text, pick apart call expressions and walk the tree.
They are shared by every statement handler.
"""

from collections import deque
from collections.abc import Callable, Iterable

from tree_sitter import Node

from sorbet_docs.errors import NodeNotFoundError

_DEFAULT_ENCODING = "utf-8"

# Node types
CALL = "call"
COMMENT = "comment"
CONSTANT = "constant"
SCOPE_RESOLUTION = "scope_resolution"
METHOD = "method"
SINGLETON_METHOD = "singleton_method"
PAIR = "pair"
HASH = "hash"

# Call names that can carry a type signature besides method definitions
_ATTRIBUTE_METHODS = frozenset({"attr", "attr_accessor", "attr_reader", "attr_writer"})

# Arguments of these calls hold nested types (e.g. `T.proc.params(...)`) and
# are not walked during BFS traversal
_SKIP_METHOD_CONTENTS = frozenset({"params", "returns"})

# Fields that are part of a definition's header rather than its body
_HEADER_FIELDS = ("name", "superclass", "parameters", "object", "value")


def get_node_text(node: Node) -> str:
    """Get the source text of a node.

    Args:
        node: Tree-sitter node parsed from an in-memory byte string

    Returns:
        Text content of the node, or an empty string if unavailable

    """
    text = node.text
    if text is None:
        return ""
    return text.decode(_DEFAULT_ENCODING)


def find_nodes_by_type(node: Node, node_type: str) -> list[Node]:
    """Find all descendant nodes of a specific type (depth-first order).

    Args:
        node: Root node to search from
        node_type: Type of nodes to find

    Returns:
        List of matching nodes

    """
    results: list[Node] = []
    _collect_nodes_by_type(node, node_type, results)
    return results


def body_statements(node: Node) -> list[Node]:
    """Return the statements inside a class, module, method or block.

    Comments are included; they sit between statements in source order.

    Args:
        node: A definition or block node

    Returns:
        Named child nodes of the body, or an empty list for an empty body

    """
    body = node.child_by_field_name("body")
    if body is not None:
        return list(body.named_children)

    # Grammar versions without a body node keep statements as direct children
    header = {
        child.id
        for field in _HEADER_FIELDS
        if (child := node.child_by_field_name(field)) is not None
    }
    return [child for child in node.named_children if child.id not in header]


def call_name(node: Node) -> str | None:
    """Return the method name of a call node, or None for other nodes."""
    if node.type != CALL:
        return None
    method = node.child_by_field_name("method")
    return get_node_text(method) if method is not None else None


def is_bare_call(node: Node, names: frozenset[str] | set[str]) -> bool:
    """Check if a node is a receiver-less call to one of the given names."""
    return (
        node.type == CALL
        and node.child_by_field_name("receiver") is None
        and call_name(node) in names
    )


def call_arguments(node: Node) -> list[Node]:
    """Return the argument nodes of a call, without punctuation or comments."""
    arguments = node.child_by_field_name("arguments")
    if arguments is None:
        return []
    return [child for child in arguments.named_children if child.type != COMMENT]


def positional_arguments(node: Node) -> list[Node]:
    """Return positional arguments of a call (keyword pairs and hashes excluded)."""
    return [arg for arg in call_arguments(node) if arg.type not in (PAIR, HASH)]


def keyword_arguments(node: Node) -> dict[str, Node]:
    """Return keyword arguments of a call as a name -> value node mapping.

    Both `key: value` and `:key => value` pairs are read, including pairs
    inside an explicit trailing hash literal.
    """
    pairs: list[Node] = []
    for arg in call_arguments(node):
        if arg.type == PAIR:
            pairs.append(arg)
        elif arg.type == HASH:
            pairs.extend(hash_pairs(arg))
    return pairs_by_name(pairs)


def hash_pairs(node: Node) -> list[Node]:
    """Return the `pair` children of a hash literal."""
    return [child for child in node.named_children if child.type == PAIR]


def pairs_by_name(pairs: Iterable[Node]) -> dict[str, Node]:
    """Map pair nodes to a key name -> value node mapping; later keys win."""
    keywords: dict[str, Node] = {}
    for pair in pairs:
        key = pair.child_by_field_name("key")
        value = pair.child_by_field_name("value")
        if key is None or value is None:
            continue
        keywords[symbol_name(key)] = value
    return keywords


def symbol_name(node: Node) -> str:
    """Strip symbol and string delimiters from a name-like node.

    `:foo`, `foo:`, `:"foo"` and `"foo"` all yield `foo`.
    """
    text = get_node_text(node).strip()
    text = text.removeprefix(":").removesuffix(":")
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        text = text[1:-1]
    return text


def bfs_traverse(node: Node, visitor: Callable[[Node], None]) -> None:
    """Traverse syntax nodes in breadth-first order.

    The visitor is invoked on each node before its children are queued. The
    arguments of `params` and `returns` calls are not descended into; their
    receiver chain still is.

    Args:
        node: Root node of the traversal
        visitor: Called once per visited node

    """
    queue: deque[Node] = deque([node])
    while queue:
        current = queue.popleft()
        visitor(current)
        if call_name(current) in _SKIP_METHOD_CONTENTS:
            arguments = current.child_by_field_name("arguments")
            queue.extend(
                child
                for child in current.children
                if arguments is None or child.id != arguments.id
            )
        else:
            queue.extend(current.children)


def sibling(node: Node) -> Node:
    """Find the statement following a node among its parent's children.

    Comments are skipped.

    Raises:
        NodeNotFoundError: If the node is the last statement

    """
    parent = node.parent
    if parent is None:
        raise NodeNotFoundError(f"Node '{node.type}' has no parent")

    siblings = [child for child in parent.named_children if child.type != COMMENT]
    for index, child in enumerate(siblings):
        if child.id == node.id:
            if index + 1 < len(siblings):
                return siblings[index + 1]
            break
    raise NodeNotFoundError(
        f"No statement follows '{node.type}' at line {node.start_point[0] + 1}"
    )


def resolve_sig_target(node: Node) -> Node:
    """Get the node a `sig` attaches to, bypassing visibility modifiers and the like.

    Raises:
        NodeNotFoundError: If no method definition or attribute call is found

    """
    if _is_sigable(node):
        return node

    found: list[Node] = []

    def _visit(candidate: Node) -> None:
        if not found and candidate.type in (METHOD, SINGLETON_METHOD):
            found.append(candidate)

    bfs_traverse(node, _visit)
    if not found:
        raise NodeNotFoundError(
            f"No signable definition at line {node.start_point[0] + 1}"
        )
    return found[0]


def _is_sigable(node: Node) -> bool:
    match node.type:
        case "method" | "singleton_method":
            return True
        case "call":
            return call_name(node) in _ATTRIBUTE_METHODS
        case _:
            return False


def _collect_nodes_by_type(node: Node, node_type: str, results: list[Node]) -> None:
    if node.type == node_type:
        results.append(node)

    for child in node.children:
        _collect_nodes_by_type(child, node_type, results)
