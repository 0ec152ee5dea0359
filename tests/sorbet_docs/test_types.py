"""Tests for the Sorbet type converter."""

from collections.abc import Callable

import pytest
from tree_sitter import Node

from sorbet_docs.types import FALLBACK_TYPE, convert


@pytest.fixture
def type_node(first_statement: Callable[[str], Node]) -> Callable[[str], Node]:
    """Parse a type expression as the right-hand side of an assignment."""

    def _type_node(expression: str) -> Node:
        assignment = first_statement(f"x = {expression}")
        right = assignment.child_by_field_name("right")
        assert right is not None
        return right

    return _type_node


class TestReferences:
    """Test plain constants and aliased singleton types."""

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("String", ["String"]),
            ("Shop::Order", ["Shop::Order"]),
            ("T::Boolean", ["Boolean"]),
            ("NilClass", ["nil"]),
            ("TrueClass", ["true"]),
            ("FalseClass", ["false"]),
        ],
    )
    def test_reference_conversion(self, type_node, expression: str, expected: list[str]) -> None:
        """Test that references convert to their names or aliases."""
        assert convert(type_node(expression)) == expected

    def test_missing_type_falls_back_to_object(self) -> None:
        """Test that an absent type expression converts to Object."""
        assert convert(None) == [FALLBACK_TYPE]


class TestTMethods:
    """Test `T.<method>` type expressions."""

    def test_nilable_appends_nil_last(self, type_node) -> None:
        """Test that T.nilable adds nil after the wrapped types."""
        assert convert(type_node("T.nilable(String)")) == ["String", "nil"]

    def test_nilable_of_union_flattens(self, type_node) -> None:
        """Test that a nilable union lists each member before nil."""
        result = convert(type_node("T.nilable(T.any(Integer, Float))"))

        assert result == ["Integer", "Float", "nil"]

    def test_any_concatenates_members(self, type_node) -> None:
        """Test that T.any lists every member type in order."""
        assert convert(type_node("T.any(String, Symbol, Integer)")) == ["String", "Symbol", "Integer"]

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("T.untyped", ["Object"]),
            ("T.noreturn", ["void"]),
            ("T.class_of(Shop::Order)", ["T.class_of(Shop::Order)"]),
            ("T.attached_class", ["T.attached_class"]),
            ("T.self_type", ["T.self_type"]),
            ("T.all(Comparable, Enumerable)", ["T.all(Comparable, Enumerable)"]),
            ("T.type_parameter(:U)", ["T.type_parameter(:U)"]),
        ],
    )
    def test_special_t_methods(self, type_node, expression: str, expected: list[str]) -> None:
        """Test T methods with fixed or verbatim renderings."""
        assert convert(type_node(expression)) == expected

    def test_proc_chain_converts_to_proc(self, type_node) -> None:
        """Test that T.proc signatures convert to Proc."""
        result = convert(type_node("T.proc.params(x: Integer).returns(String)"))

        assert result == ["Proc"]

    def test_unknown_call_falls_back_to_object(self, type_node, caplog) -> None:
        """Test that calls on other receivers fall back with a warning."""
        result = convert(type_node("Foo.bar(String)"))

        assert result == ["Object"]
        assert "Unsupported type call" in caplog.text


class TestGenerics:
    """Test generic container types."""

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("T::Array[String]", ["Array<String>"]),
            ("T::Set[Integer]", ["Set<Integer>"]),
            ("T::Enumerable[Symbol]", ["Enumerable<Symbol>"]),
            ("T::Range[Integer]", ["Range<Integer>"]),
            ("T::Class[Shop::Order]", ["Class<Shop::Order>"]),
        ],
    )
    def test_array_like_containers(self, type_node, expression: str, expected: list[str]) -> None:
        """Test that array-like containers render with angle brackets."""
        assert convert(type_node(expression)) == expected

    def test_array_of_union_joins_members(self, type_node) -> None:
        """Test that an array of several types lists them inside the brackets."""
        result = convert(type_node("T::Array[T.nilable(String)]"))

        assert result == ["Array<String, nil>"]

    def test_hash_container(self, type_node) -> None:
        """Test that T::Hash renders key and value types."""
        result = convert(type_node("T::Hash[Symbol, T::Array[Integer]]"))

        assert result == ["Hash{Symbol => Array<Integer>}"]

    def test_other_container_keeps_its_name(self, type_node) -> None:
        """Test that user generics render with their full name."""
        result = convert(type_node("Shop::Box[String, Integer]"))

        assert result == ["Shop::Box<String, Integer>"]


class TestLiterals:
    """Test tuple and shape literals."""

    def test_tuple(self, type_node) -> None:
        """Test that array literals render as fixed-length arrays."""
        assert convert(type_node("[String, Integer]")) == ["Array(String, Integer)"]

    def test_tuple_member_with_several_types(self, type_node) -> None:
        """Test that a nilable tuple member is bracketed."""
        result = convert(type_node("[String, T.nilable(Integer)]"))

        assert result == ["Array(String, [Integer, nil])"]

    def test_shape(self, type_node) -> None:
        """Test that shapes render as a Symbol-keyed hash with deduplicated values."""
        result = convert(type_node("{name: String, nickname: String, age: Integer}"))

        assert result == ["Hash{Symbol => String, Integer}"]

    def test_parentheses_are_unwrapped(self, type_node) -> None:
        """Test that parenthesised types convert like the inner type."""
        assert convert(type_node("(String)")) == ["String"]


class TestConverterProperties:
    """Test properties that hold for every conversion."""

    def test_conversion_is_repeatable(self, type_node) -> None:
        """Test that converting the same node twice gives the same result."""
        node = type_node("T.nilable(T::Hash[String, T.any(Integer, Float)])")

        assert convert(node) == convert(node)

    def test_newlines_collapse_to_single_space(self, type_node) -> None:
        """Test that multi-line verbatim types are written on one line."""
        result = convert(type_node("T.all(\n  Comparable,\n  Enumerable\n)"))

        assert len(result) == 1
        assert "\n" not in result[0]

    def test_unsupported_literal_falls_back(self, type_node, caplog) -> None:
        """Test that other expressions fall back to Object with a warning."""
        result = convert(type_node("42"))

        assert result == ["Object"]
        assert "Unsupported type expression" in caplog.text
