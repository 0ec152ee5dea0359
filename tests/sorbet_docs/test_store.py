"""Tests for DocumentationStore and documentation object paths."""

import pytest

from sorbet_docs.code_objects import (
    ClassObject,
    ConstantObject,
    MethodObject,
    ModuleObject,
    qualify_name,
    split_path,
)
from sorbet_docs.errors import ObjectNotFoundError
from sorbet_docs.store import DocumentationStore


@pytest.fixture
def store() -> DocumentationStore:
    """An empty store."""
    return DocumentationStore()


class TestPaths:
    """Test object paths."""

    def test_method_paths_by_scope(self) -> None:
        """Test that instance and class methods use different separators."""
        assert MethodObject(name="run", namespace="Foo").path == "Foo#run"
        assert MethodObject(name="run", namespace="Foo", scope="class").path == "Foo.run"

    def test_nested_namespace_path(self) -> None:
        """Test that namespace members are joined with ::."""
        assert ConstantObject(name="MAX", namespace="Foo::Bar").path == "Foo::Bar::MAX"
        assert ClassObject(name="Foo").path == "Foo"

    @pytest.mark.parametrize(
        ("namespace", "written", "expected"),
        [
            ("", "Foo", "Foo"),
            ("Outer", "Inner", "Outer::Inner"),
            ("Outer", "Inner :: Leaf", "Outer::Inner::Leaf"),
            ("Outer", "::Top", "Top"),
        ],
    )
    def test_qualify_name(self, namespace: str, written: str, expected: str) -> None:
        """Test that written names resolve against the enclosing namespace."""
        assert qualify_name(namespace, written) == expected

    def test_split_path(self) -> None:
        """Test splitting a path into parent and name."""
        assert split_path("A::B::C") == ("A::B", "C")
        assert split_path("A") == ("", "A")


class TestRegistration:
    """Test registering and looking up objects."""

    def test_register_attaches_to_namespace(self, store) -> None:
        """Test that registered objects are listed as namespace children."""
        store.register(ClassObject(name="Foo"))
        store.register(MethodObject(name="bar", namespace="Foo"))

        assert store.root.children == ["Foo"]
        assert [obj.path for obj in store.children_of("Foo")] == ["Foo#bar"]
        assert len(store) == 2

    def test_register_replaces_same_path(self, store) -> None:
        """Test that re-registering a path replaces the object once."""
        store.register(ClassObject(name="Foo"))
        store.register(MethodObject(name="bar", namespace="Foo", docstring="old"))
        store.register(MethodObject(name="bar", namespace="Foo", docstring="new"))

        assert store.get("Foo#bar").docstring == "new"
        assert store.namespace("Foo").children == ["Foo#bar"]

    def test_register_into_unknown_namespace_raises(self, store) -> None:
        """Test that the namespace must exist before its members."""
        with pytest.raises(ObjectNotFoundError):
            store.register(MethodObject(name="bar", namespace="Missing"))

    def test_get_missing_raises_and_at_returns_none(self, store) -> None:
        """Test the two lookup flavours for a missing path."""
        assert store.at("Foo") is None
        assert "Foo" not in store
        with pytest.raises(ObjectNotFoundError, match="'Foo' not found"):
            store.get("Foo")

    def test_namespace_rejects_non_namespace(self, store) -> None:
        """Test that a constant is not usable as a namespace."""
        store.register(ConstantObject(name="MAX"))

        with pytest.raises(ObjectNotFoundError, match="not a namespace"):
            store.namespace("MAX")

    def test_ensure_namespace_creates_placeholders(self, store) -> None:
        """Test that missing parents are created as modules."""
        namespace = store.ensure_namespace("A::B")

        assert isinstance(namespace, ModuleObject)
        assert store.paths() == ["A", "A::B"]
        assert store.ensure_namespace("A::B") is namespace

    def test_find_or_create_method(self, store) -> None:
        """Test that existing methods are returned and new ones are not registered."""
        store.register(ClassObject(name="Foo"))
        registered = store.register(MethodObject(name="bar", namespace="Foo"))

        assert store.find_or_create_method("Foo", "bar") is registered
        created = store.find_or_create_method("Foo", "baz", "class")
        assert created.path == "Foo.baz"
        assert created.path not in store
