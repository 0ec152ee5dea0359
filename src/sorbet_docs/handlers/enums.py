"""Handler for `T::Enum` value blocks.

    class Suit < T::Enum
      enums do
        # The spades suit
        Spades = new
      end
    end

Every constant assigned inside the `enums` block is documented as a constant
of the enclosing class.
"""

import logging

from tree_sitter import Node

from sorbet_docs.handlers.base import HandlerContext
from sorbet_docs.handlers.constants import constant_assignment, register_constant
from sorbet_docs.nodes import bfs_traverse, is_bare_call

logger = logging.getLogger(__name__)

_ENUMS = frozenset({"enums"})


class EnumsHandler:
    """Registers enum values as constants."""

    name = "enums"
    namespace_only = True

    def handles(self, node: Node, context: HandlerContext) -> bool:
        """Handle `enums do ... end` calls."""
        return is_bare_call(node, _ENUMS) and node.child_by_field_name("block") is not None

    def process(self, node: Node, context: HandlerContext) -> None:
        """Register each constant assigned in the block, in source order."""
        block = node.child_by_field_name("block")
        if block is None:
            return

        assignments: list[Node] = []

        def _collect(candidate: Node) -> None:
            if constant_assignment(candidate) is not None:
                assignments.append(candidate)

        bfs_traverse(block, _collect)
        # BFS visits shallow assignments first; document them in source order
        assignments.sort(key=lambda assignment: assignment.start_byte)

        for assignment in assignments:
            constant = register_constant(assignment, context)
            if constant is not None:
                logger.debug("Registered enum value %s", constant.path)
