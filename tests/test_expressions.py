"""Tests for rule expressions and their combinators."""

import pytest

from stillpoint.core.expressions import (
    And,
    Const,
    Not,
    Or,
    Threshold,
    dependencies,
    format_expression,
)
from stillpoint.core.operators import (
    active,
    all_of,
    any_of,
    at_level,
    capped,
    inactive,
    none_of,
)


class TestExpressionNodes:
    """Test construction and composition of expression nodes."""

    def test_threshold_defaults(self):
        """A bare threshold means 'at level 1 or above'."""
        node = Threshold(2)
        assert node.op == ">="
        assert node.value == 1

    def test_and_composition(self):
        """Test & builds an And node."""
        node = Threshold(0) & Threshold(1)
        assert isinstance(node, And)
        assert node.operands == (Threshold(0), Threshold(1))

    def test_or_composition(self):
        """Test | builds an Or node."""
        node = Threshold(0) | Const(1)
        assert isinstance(node, Or)
        assert node.operands == (Threshold(0), Const(1))

    def test_not_composition(self):
        """Test ~ builds a Not node."""
        node = ~Threshold(0)
        assert isinstance(node, Not)
        assert node.operand == Threshold(0)

    def test_nodes_are_immutable_and_hashable(self):
        """Nodes are frozen values usable as dictionary keys."""
        node = And(Threshold(0), Not(Const(1)))
        with pytest.raises(AttributeError):
            node.operands = ()  # type: ignore[misc]
        assert {node: 1}[And(Threshold(0), Not(Const(1)))] == 1


class TestDependencies:
    """Test collection of referenced species."""

    def test_constant_has_no_dependencies(self):
        assert dependencies(Const(1)) == frozenset()

    def test_nested_dependencies(self):
        """Dependencies are collected through every node kind."""
        node = Or(And(Threshold(0), Not(Threshold(3, "<", 2))), Threshold(1))
        assert dependencies(node) == frozenset({0, 1, 3})

    def test_unknown_node_raises(self):
        """Anything outside the five node kinds is rejected."""
        with pytest.raises(TypeError, match="Not a rule expression"):
            dependencies("A")  # type: ignore[arg-type]


class TestFormatting:
    """Test rendering in the model file syntax."""

    def test_format_threshold(self):
        assert format_expression(Threshold(1, "<", 2), ["A", "B"]) == "B < 2"

    def test_format_nested(self):
        """Composite operands are parenthesised, negations and constants are not."""
        node = Or(And(Threshold(0), Not(Threshold(1))), Const(0))
        text = format_expression(node, ["A", "B"])
        assert text == "((A >= 1) & !(B >= 1)) | 0"


class TestOperators:
    """Test combinator functions."""

    def test_all_of(self):
        node = all_of(Threshold(0), Threshold(1), Threshold(2))
        assert node == And(Threshold(0), Threshold(1), Threshold(2))

    def test_any_of(self):
        node = any_of(Threshold(0), Threshold(1))
        assert node == Or(Threshold(0), Threshold(1))

    def test_single_operand_is_returned_unchanged(self):
        assert all_of(Threshold(0)) == Threshold(0)
        assert any_of(Threshold(0)) == Threshold(0)

    def test_none_of(self):
        node = none_of(Threshold(0), Threshold(1))
        assert node == Not(Or(Threshold(0), Threshold(1)))

    def test_empty_operands_raise(self):
        with pytest.raises(ValueError, match="At least one expression"):
            all_of()
        with pytest.raises(ValueError, match="At least one expression"):
            any_of()
        with pytest.raises(ValueError, match="At least one expression"):
            none_of()

    def test_threshold_shorthands(self):
        assert active(1, 2) == Threshold(1, ">=", 2)
        assert inactive(1) == Threshold(1, "<", 1)
        assert at_level(0, 3) == Threshold(0, "==", 3)

    def test_capped(self):
        assert capped(1, Threshold(0)) == And(Const(1), Threshold(0))
