"""Handlers for `class`, `module` and `class << self` bodies."""

import logging

from tree_sitter import Node

from sorbet_docs.code_objects import (
    ClassObject,
    ModuleObject,
    NamespaceObject,
    qualify_name,
    split_path,
)
from sorbet_docs.handlers.base import HandlerContext

logger = logging.getLogger(__name__)


def class_path(node: Node, context: HandlerContext) -> str:
    """Return the fully qualified path of a class or module declaration.

    The name as written in source may contain whitespace (`Foo :: Bar`) or a
    leading `::`; both are normalised.
    """
    name_node = node.child_by_field_name("name")
    if name_node is None:
        raise ValueError(f"{node.type} without a name at line {node.start_point[0] + 1}")
    return qualify_name(context.namespace.path, context.text(name_node))


class ClassHandler:
    """Registers classes and processes their bodies.

    After the body is processed the registry's class-close hooks run, which
    is where constructors are synthesised from accumulated fields.
    """

    name = "class"
    namespace_only = True

    def handles(self, node: Node, context: HandlerContext) -> bool:
        """Handle `class` declarations."""
        return node.type == "class"

    def process(self, node: Node, context: HandlerContext) -> None:
        """Register the class, walk its body, then run class-close hooks."""
        path = class_path(node, context)
        parent_path, name = split_path(path)
        context.store.ensure_namespace(parent_path)

        superclass = self._superclass(node, context)
        docstring = context.docstring_for(node)
        existing = context.store.at(path)
        if isinstance(existing, ClassObject):
            # Reopened class: keep what is known, fill in what is new
            class_object = existing
            if superclass and not class_object.superclass:
                class_object.superclass = superclass
            if docstring and not class_object.docstring:
                class_object.docstring = docstring
        else:
            class_object = ClassObject(
                name=name,
                namespace=parent_path,
                superclass=superclass,
                docstring=docstring,
            )
            if existing is not None and isinstance(existing, NamespaceObject):
                # A placeholder module created for a nested name is upgraded
                class_object.children = existing.children
                class_object.attributes = existing.attributes
            context.register(class_object, node)

        logger.debug("Processing class %s", path)
        class_context = context.for_namespace(class_object)
        class_context.process_body(node)
        context.registry.run_class_close_hooks(node, class_object, context)

    def _superclass(self, node: Node, context: HandlerContext) -> str | None:
        superclass = node.child_by_field_name("superclass")
        if superclass is None:
            return None
        expression = [child for child in superclass.named_children if child.type != "comment"]
        if not expression:
            return None
        return "".join(context.text(expression[0]).split())


class ModuleHandler:
    """Registers modules and processes their bodies."""

    name = "module"
    namespace_only = True

    def handles(self, node: Node, context: HandlerContext) -> bool:
        """Handle `module` declarations."""
        return node.type == "module"

    def process(self, node: Node, context: HandlerContext) -> None:
        """Register the module and walk its body."""
        path = class_path(node, context)
        parent_path, name = split_path(path)
        context.store.ensure_namespace(parent_path)

        existing = context.store.at(path)
        if isinstance(existing, ModuleObject):
            module_object = existing
            if not module_object.docstring:
                module_object.docstring = context.docstring_for(node)
        else:
            module_object = ModuleObject(
                name=name,
                namespace=parent_path,
                docstring=context.docstring_for(node),
            )
            context.register(module_object, node)

        context.for_namespace(module_object).process_body(node)


class SingletonClassHandler:
    """Processes `class << self` bodies at class scope."""

    name = "singleton_class"
    namespace_only = True

    def handles(self, node: Node, context: HandlerContext) -> bool:
        """Handle `class << self`."""
        if node.type != "singleton_class":
            return False
        value = node.child_by_field_name("value")
        return value is not None and context.text(value) == "self"

    def process(self, node: Node, context: HandlerContext) -> None:
        """Walk the body with class scope in the current namespace."""
        context.for_namespace(context.namespace, scope="class").process_body(node)
