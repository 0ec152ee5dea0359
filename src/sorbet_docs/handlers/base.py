"""Statement handler protocol, handler context and handler registry.

The processor walks the statements of every namespace body and asks the
registry which handlers apply to each statement. Handlers flagged
`namespace_only` are only consulted for statements directly inside a class,
module or the top level, never inside method bodies.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Protocol, runtime_checkable

from tree_sitter import Node

from sorbet_docs.code_objects import (
    ClassObject,
    CodeObject,
    MethodObject,
    NamespaceObject,
    Scope,
    Visibility,
)
from sorbet_docs.config import SorbetDocsConfig
from sorbet_docs.nodes import COMMENT, body_statements, get_node_text
from sorbet_docs.parser import ParsedSource
from sorbet_docs.state import FieldAccumulator
from sorbet_docs.store import DocumentationStore

logger = logging.getLogger(__name__)


@runtime_checkable
class StatementHandler(Protocol):
    """Protocol for statement handlers.

    Each handler provides:
    - A name used in log messages
    - Whether it only applies to statements directly inside a namespace
    - A predicate selecting the statements it handles
    - A process method registering documentation objects
    """

    @property
    def name(self) -> str:
        """Handler name (e.g. 'enums', 'struct_field')."""
        ...

    @property
    def namespace_only(self) -> bool:
        """True if the handler ignores statements inside method bodies."""
        ...

    def handles(self, node: Node, context: HandlerContext) -> bool:
        """Check if the handler applies to a statement."""
        ...

    def process(self, node: Node, context: HandlerContext) -> None:
        """Process a statement, registering documentation objects."""
        ...


# Called after a class body has been processed with the context enclosing the class
ClassCloseHook = Callable[[Node, ClassObject, "HandlerContext"], None]


@dataclass
class HandlerContext:
    """Everything a handler needs while processing one statement.

    A context is created per body being walked. Handlers may change
    `visibility` on it, which then applies to the following statements of
    the same body.
    """

    parsed: ParsedSource
    store: DocumentationStore
    fields: FieldAccumulator
    config: SorbetDocsConfig
    registry: HandlerRegistry
    namespace: NamespaceObject
    owner: CodeObject
    scope: Scope = "instance"
    visibility: Visibility = "public"

    @property
    def in_namespace(self) -> bool:
        """True while walking a namespace body rather than a method body."""
        return self.owner is self.namespace

    def for_namespace(self, namespace: NamespaceObject, scope: Scope = "instance") -> HandlerContext:
        """Return a context for walking the body of a namespace."""
        return replace(self, namespace=namespace, owner=namespace, scope=scope, visibility="public")

    def for_method(self, method: MethodObject) -> HandlerContext:
        """Return a context for walking the body of a method."""
        return replace(self, owner=method)

    def with_visibility(self, visibility: Visibility) -> HandlerContext:
        """Return a context with another default visibility."""
        return replace(self, visibility=visibility)

    def text(self, node: Node) -> str:
        """Return the source text of a node."""
        return get_node_text(node)

    def docstring_for(self, node: Node) -> str:
        """Return the documentation comment attached to a node."""
        return self.parsed.docstring_for(node)

    def register(self, obj: CodeObject, node: Node | None = None) -> CodeObject:
        """Register an object, recording the file and line it was declared on."""
        if node is not None:
            obj.file = self.parsed.file_path
            obj.line = self.parsed.line_of(node)
        return self.store.register(obj)

    def process_body(self, node: Node) -> None:
        """Process the statements in the body of a definition or block."""
        for statement in body_statements(node):
            self.process_statement(statement)

    def process_statement(self, node: Node) -> None:
        """Run every applicable handler on a statement.

        A handler failing on one statement is logged and does not stop the
        remaining statements from being documented.
        """
        if node.type == COMMENT:
            return
        for handler in self.registry.handlers_for(node, self):
            try:
                handler.process(node, self)
            except Exception:
                logger.warning(
                    "Handler '%s' failed on %s:%d, skipping statement",
                    handler.name,
                    self.parsed.file_path,
                    self.parsed.line_of(node),
                    exc_info=True,
                )


class HandlerRegistry:
    """Ordered statement handlers and class-close hooks."""

    def __init__(self) -> None:
        """Initialise an empty registry."""
        self._handlers: list[StatementHandler] = []
        self._class_close_hooks: list[ClassCloseHook] = []

    @property
    def handlers(self) -> tuple[StatementHandler, ...]:
        """Registered statement handlers, in consultation order."""
        return tuple(self._handlers)

    def register(self, handler: StatementHandler) -> None:
        """Append a statement handler."""
        self._handlers.append(handler)

    def register_class_close_hook(self, hook: ClassCloseHook) -> None:
        """Append a hook run after each class body."""
        self._class_close_hooks.append(hook)

    def handlers_for(self, node: Node, context: HandlerContext) -> list[StatementHandler]:
        """Return the handlers that apply to a statement in a context."""
        return [
            handler
            for handler in self._handlers
            if (context.in_namespace or not handler.namespace_only)
            and handler.handles(node, context)
        ]

    def run_class_close_hooks(
        self, node: Node, class_object: ClassObject, context: HandlerContext
    ) -> None:
        """Run the class-close hooks for a class whose body was just processed."""
        for hook in self._class_close_hooks:
            try:
                hook(node, class_object, context)
            except Exception:
                logger.warning(
                    "Class-close hook failed for %s",
                    class_object.path,
                    exc_info=True,
                )
