"""Handler for constant assignments in namespace bodies."""

from tree_sitter import Node

from sorbet_docs.code_objects import ConstantObject
from sorbet_docs.handlers.base import HandlerContext
from sorbet_docs.nodes import CONSTANT


def constant_assignment(node: Node) -> tuple[Node, Node] | None:
    """Return the (constant, value) nodes of `CONSTANT = value`, or None."""
    if node.type != "assignment":
        return None
    left = node.child_by_field_name("left")
    right = node.child_by_field_name("right")
    if left is None or right is None or left.type != CONSTANT:
        return None
    return left, right


def register_constant(node: Node, context: HandlerContext) -> ConstantObject | None:
    """Register a constant for a `CONSTANT = value` statement.

    Returns:
        The registered constant, or None if the node is not a constant assignment

    """
    assignment = constant_assignment(node)
    if assignment is None:
        return None
    left, right = assignment
    constant = ConstantObject(
        name=context.text(left),
        namespace=context.namespace.path,
        docstring=context.docstring_for(node),
        source=context.text(node),
        value=context.text(right),
    )
    context.register(constant, node)
    return constant


class ConstantHandler:
    """Registers `CONSTANT = value` statements."""

    name = "constant"
    namespace_only = True

    def handles(self, node: Node, context: HandlerContext) -> bool:
        """Handle assignments to a constant."""
        return constant_assignment(node) is not None

    def process(self, node: Node, context: HandlerContext) -> None:
        """Register the constant."""
        register_constant(node, context)
