"""Handlers for method definitions, attribute macros and visibility keywords."""

import logging

from tree_sitter import Node

from sorbet_docs.code_objects import AttributeSlots, MethodObject, Visibility
from sorbet_docs.handlers.base import HandlerContext
from sorbet_docs.nodes import (
    METHOD,
    SINGLETON_METHOD,
    call_arguments,
    call_name,
    is_bare_call,
    positional_arguments,
    symbol_name,
)

logger = logging.getLogger(__name__)

_VISIBILITIES: frozenset[str] = frozenset({"public", "protected", "private"})
_ATTRIBUTE_MACROS = {
    "attr": (True, False),
    "attr_reader": (True, False),
    "attr_writer": (False, True),
    "attr_accessor": (True, True),
}
_NAME_NODE_TYPES = frozenset({"simple_symbol", "delimited_symbol", "string"})


def method_parameters(node: Node) -> list[tuple[str, str | None]]:
    """Return (name, default source) pairs for a method definition's parameters.

    Keyword parameters are named with a trailing colon; splat and block
    parameters keep their sigil (`*rest`, `**options`, `&block`).
    """
    parameters_node = node.child_by_field_name("parameters")
    if parameters_node is None:
        return []

    parameters: list[tuple[str, str | None]] = []
    for parameter in parameters_node.named_children:
        name_node = parameter.child_by_field_name("name")
        value_node = parameter.child_by_field_name("value")
        name = name_node.text.decode() if name_node is not None and name_node.text else ""
        default = value_node.text.decode() if value_node is not None and value_node.text else None
        match parameter.type:
            case "identifier":
                parameters.append((parameter.text.decode() if parameter.text else "", None))
            case "optional_parameter":
                parameters.append((name, default))
            case "keyword_parameter":
                parameters.append((f"{name}:", default))
            case "comment":
                continue
            case _:
                # splat, hash splat, block and forwarding parameters
                parameters.append((parameter.text.decode() if parameter.text else "", None))
    return parameters


class MethodHandler:
    """Registers `def` and `def self.` methods and walks their bodies."""

    name = "method"
    namespace_only = True

    def handles(self, node: Node, context: HandlerContext) -> bool:
        """Handle method definitions."""
        return node.type in (METHOD, SINGLETON_METHOD)

    def process(self, node: Node, context: HandlerContext) -> None:
        """Register the method with its parameters, docstring and visibility."""
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return
        scope = context.scope
        if node.type == SINGLETON_METHOD:
            receiver = node.child_by_field_name("object")
            if receiver is None or context.text(receiver) != "self":
                logger.debug(
                    "Skipping singleton method on '%s' at line %d",
                    context.text(receiver) if receiver is not None else "?",
                    context.parsed.line_of(node),
                )
                return
            scope = "class"

        method = context.store.find_or_create_method(
            context.namespace.path, context.text(name_node), scope
        )
        method.docstring = context.docstring_for(node)
        method.source = context.text(node)
        method.parameters = method_parameters(node)
        method.visibility = context.visibility
        method.explicit = True
        context.register(method, node)

        context.for_method(method).process_body(node)


class AttributeHandler:
    """Registers reader and writer methods for `attr_*` macros."""

    name = "attribute"
    namespace_only = True

    def handles(self, node: Node, context: HandlerContext) -> bool:
        """Handle `attr`, `attr_reader`, `attr_writer` and `attr_accessor`."""
        return is_bare_call(node, set(_ATTRIBUTE_MACROS))

    def process(self, node: Node, context: HandlerContext) -> None:
        """Register accessors and the attribute table entry for every named attribute."""
        read, write = _ATTRIBUTE_MACROS[call_name(node) or "attr"]
        docstring = context.docstring_for(node)
        source = context.text(node)
        namespace = context.namespace

        for argument in positional_arguments(node):
            if argument.type not in _NAME_NODE_TYPES:
                continue
            attribute = symbol_name(argument)
            span = context.config.code_span(attribute)
            slots = AttributeSlots()

            if read:
                reader = MethodObject(
                    name=attribute,
                    namespace=namespace.path,
                    scope=context.scope,
                    visibility=context.visibility,
                    docstring=docstring or f"Returns the value of attribute {span}.",
                    source=source,
                )
                context.register(reader, node)
                slots.read = reader.path

            if write:
                writer = MethodObject(
                    name=f"{attribute}=",
                    namespace=namespace.path,
                    scope=context.scope,
                    visibility=context.visibility,
                    docstring=(
                        f"Sets the attribute {span}\n"
                        f"@param value the value to set the attribute {span} to."
                    ),
                    source=source,
                    parameters=[("value", None)],
                )
                context.register(writer, node)
                slots.write = writer.path

            namespace.attributes[context.scope][attribute] = slots


class VisibilityHandler:
    """Tracks `private`, `protected` and `public`.

    - A bare keyword changes the visibility of the following definitions.
    - `private def foo` processes the wrapped definition with that visibility.
    - `private :foo, :bar` changes already registered methods.
    """

    name = "visibility"
    namespace_only = True

    def handles(self, node: Node, context: HandlerContext) -> bool:
        """Handle visibility keywords and visibility calls."""
        if node.type == "identifier":
            return context.text(node) in _VISIBILITIES
        return is_bare_call(node, _VISIBILITIES)

    def process(self, node: Node, context: HandlerContext) -> None:
        """Apply the visibility to the body, the wrapped definition or the named methods."""
        visibility: Visibility
        match context.text(node) if node.type == "identifier" else call_name(node):
            case "private":
                visibility = "private"
            case "protected":
                visibility = "protected"
            case _:
                visibility = "public"

        arguments = call_arguments(node) if node.type == "call" else []
        if not arguments:
            context.visibility = visibility
            return

        wrapped_context = context.with_visibility(visibility)
        for argument in arguments:
            if argument.type in _NAME_NODE_TYPES:
                self._update_registered(symbol_name(argument), visibility, context)
            else:
                wrapped_context.process_statement(argument)

    def _update_registered(
        self, method_name: str, visibility: Visibility, context: HandlerContext
    ) -> None:
        method = context.store.find_or_create_method(
            context.namespace.path, method_name, context.scope
        )
        if method.path not in context.store:
            logger.debug("Visibility set for unknown method %s", method.path)
            return
        method.visibility = visibility
