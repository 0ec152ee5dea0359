"""Tests for class, module and handler registry behaviour."""

from unittest.mock import MagicMock

from sorbet_docs.code_objects import ClassObject, ModuleObject
from sorbet_docs.handlers import HandlerRegistry, StatementHandler, default_registry
from sorbet_docs.processor import DocumentationProcessor


class TestClassHandler:
    """Test documenting classes."""

    def test_class_with_superclass_and_docstring(self, document) -> None:
        """Test the class object registered for a declaration."""
        store = document("# A widget\nclass Widget < Base::Component\nend\n")

        widget = store.get("Widget")

        assert isinstance(widget, ClassObject)
        assert widget.superclass == "Base::Component"
        assert widget.docstring == "A widget"
        assert widget.line == 2

    def test_nested_namespaces(self, document) -> None:
        """Test that nesting builds qualified paths."""
        store = document("module A\n  class B\n    module C\n    end\n  end\nend\n")

        assert store.paths() == ["A", "A::B", "A::B::C"]
        assert isinstance(store.get("A::B::C"), ModuleObject)

    def test_compact_name_creates_placeholder_parent(self, document) -> None:
        """Test that `class A::B` registers A as a placeholder module."""
        store = document("class A::B\nend\n")

        assert isinstance(store.get("A"), ModuleObject)
        assert store.namespace("A").children == ["A::B"]

    def test_placeholder_upgraded_to_class(self, document) -> None:
        """Test that a later `class A` replaces the placeholder and keeps its children."""
        store = document("class A::B\nend\n", "class A < Base\nend\n")

        outer = store.get("A")

        assert isinstance(outer, ClassObject)
        assert outer.superclass == "Base"
        assert outer.children == ["A::B"]

    def test_reopened_class_keeps_first_docstring(self, document) -> None:
        """Test that reopening a class fills in only what is missing."""
        store = document("# First\nclass A\nend\n", "# Second\nclass A < Base\nend\n")

        outer = store.get("A")

        assert outer.docstring == "First"
        assert outer.superclass == "Base"

    def test_reopened_module_gets_docstring(self, document) -> None:
        """Test that a module documented on reopening receives the docstring."""
        store = document("module M\nend\n", "# Helpers\nmodule M\nend\n")

        assert store.get("M").docstring == "Helpers"


class TestHandlerRegistry:
    """Test handler selection and class-close hooks."""

    def test_default_registry_order(self) -> None:
        """Test that signatures are handled before definitions."""
        names = [handler.name for handler in default_registry().handlers]

        assert names[0] == "sig"
        assert names.index("sig") < names.index("method")
        assert {"enums", "struct_field", "class", "module"} <= set(names)

    def test_default_handlers_follow_protocol(self) -> None:
        """Test that every built-in handler satisfies the handler protocol."""
        for handler in default_registry().handlers:
            assert isinstance(handler, StatementHandler)

    def test_namespace_only_handlers_skip_method_bodies(self) -> None:
        """Test the namespace-only guard."""
        registry = HandlerRegistry()
        handler = MagicMock(namespace_only=True)
        handler.handles.return_value = True
        registry.register(handler)
        context = MagicMock(in_namespace=False)

        assert registry.handlers_for(MagicMock(), context) == []

        context.in_namespace = True
        assert registry.handlers_for(MagicMock(), context) == [handler]

    def test_failing_handler_does_not_stop_processing(self, caplog) -> None:
        """Test that an exception in one handler is logged and processing continues."""
        registry = default_registry()
        failing = MagicMock(namespace_only=False)
        failing.name = "failing"
        failing.handles.side_effect = lambda node, context: node.type == "class"
        failing.process.side_effect = RuntimeError("boom")
        registry.register(failing)
        processor = DocumentationProcessor(registry=registry)

        processor.process_source("class A\nend\nclass B\nend\n", "hooks.rb")

        assert "A" in processor.store
        assert "B" in processor.store
        assert "Handler 'failing' failed on hooks.rb:1" in caplog.text

    def test_class_close_hooks_run_after_body(self) -> None:
        """Test that hooks see the class after its body was processed."""
        registry = default_registry()
        seen: list[tuple[str, list[str]]] = []
        registry.register_class_close_hook(
            lambda node, class_object, context: seen.append(
                (class_object.path, list(class_object.children))
            )
        )
        processor = DocumentationProcessor(registry=registry)

        processor.process_source("module M\n  class K\n    def run; end\n  end\nend\n")

        assert seen == [("M::K", ["M::K#run"])]

    def test_failing_hook_is_logged(self, caplog) -> None:
        """Test that a failing hook does not stop later classes."""
        registry = HandlerRegistry()
        registry.register_class_close_hook(MagicMock(side_effect=RuntimeError("boom")))
        registry.run_class_close_hooks(MagicMock(), ClassObject(name="K"), MagicMock())

        assert "Class-close hook failed for K" in caplog.text
