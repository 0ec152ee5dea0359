"""Statement handlers for Ruby source with Sorbet annotations."""

from sorbet_docs.handlers.base import (
    ClassCloseHook,
    HandlerContext,
    HandlerRegistry,
    StatementHandler,
)
from sorbet_docs.handlers.constants import ConstantHandler
from sorbet_docs.handlers.constructor import ConstructorSynthesizer
from sorbet_docs.handlers.enums import EnumsHandler
from sorbet_docs.handlers.methods import AttributeHandler, MethodHandler, VisibilityHandler
from sorbet_docs.handlers.namespaces import ClassHandler, ModuleHandler, SingletonClassHandler
from sorbet_docs.handlers.sig import SigHandler
from sorbet_docs.handlers.struct_fields import StructFieldHandler


def default_registry() -> HandlerRegistry:
    """Create a registry with every built-in handler.

    Signatures are handled first so the definition that follows finds its
    docstring already rewritten.
    """
    registry = HandlerRegistry()
    for handler in (
        SigHandler(),
        VisibilityHandler(),
        ClassHandler(),
        ModuleHandler(),
        SingletonClassHandler(),
        MethodHandler(),
        AttributeHandler(),
        ConstantHandler(),
        EnumsHandler(),
        StructFieldHandler(),
    ):
        registry.register(handler)
    registry.register_class_close_hook(ConstructorSynthesizer())
    return registry


__all__ = [
    "AttributeHandler",
    "ClassCloseHook",
    "ClassHandler",
    "ConstantHandler",
    "ConstructorSynthesizer",
    "EnumsHandler",
    "HandlerContext",
    "HandlerRegistry",
    "MethodHandler",
    "ModuleHandler",
    "SigHandler",
    "SingletonClassHandler",
    "StatementHandler",
    "StructFieldHandler",
    "VisibilityHandler",
    "default_registry",
]
