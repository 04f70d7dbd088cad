"""Tests for the rule compiler and level logic."""

import pytest

from stillpoint.core.expressions import And, Const, Not, Or, Threshold
from stillpoint.core.model import Model, Species
from stillpoint.core.types import CompileError
from stillpoint.solver.compiler import UNRESOLVED, RuleCompiler, compile_model
from stillpoint.solver.norms import LevelLogic


def single_rule_model(rule, upper_bound=1, others=(1, 1)):
    """Model whose species 0 owns ``rule``; the others keep their level."""
    species = [Species(0, "X", upper_bound, rule)]
    for offset, bound in enumerate(others, start=1):
        species.append(Species(offset, f"S{offset}", bound, Threshold(offset)))
    return Model(tuple(species))


def evaluate(rule, state, upper_bound=1, logic="godel", others=(1, 1)):
    model = single_rule_model(rule, upper_bound, others)
    return compile_model(model, logic)[0](state)


class TestNodeEvaluation:
    """Test evaluation of each node kind on full states."""

    def test_constant(self):
        assert evaluate(Const(1), [0, 0, 0]) == 1
        assert evaluate(Const(2), [0, 0, 0], upper_bound=3) == 2

    def test_threshold_yields_top_or_zero(self):
        """A satisfied comparison requires the owner's top level."""
        assert evaluate(Threshold(1), [0, 1, 0], upper_bound=3) == 3
        assert evaluate(Threshold(1), [0, 0, 0], upper_bound=3) == 0

    @pytest.mark.parametrize(
        "op, expected",
        [(">=", 1), (">", 0), ("<=", 1), ("<", 0), ("==", 1), ("!=", 0)],
    )
    def test_threshold_comparisons(self, op, expected):
        """Each comparison operator against a level equal to the threshold."""
        assert evaluate(Threshold(1, op, 2), [0, 2, 0], others=(2, 1)) == expected

    def test_and_is_minimum(self):
        rule = And(Const(1), Threshold(1))
        assert evaluate(rule, [0, 1, 0], upper_bound=2) == 1
        assert evaluate(rule, [0, 0, 0], upper_bound=2) == 0

    def test_or_is_maximum(self):
        rule = Or(Const(1), Threshold(1))
        assert evaluate(rule, [0, 1, 0], upper_bound=2) == 2
        assert evaluate(rule, [0, 0, 0], upper_bound=2) == 1

    def test_not_complements_within_owner_bound(self):
        assert evaluate(Not(Const(1)), [0, 0, 0], upper_bound=3) == 2
        assert evaluate(Not(Threshold(2)), [0, 0, 1]) == 0

    def test_single_operand_composites(self):
        """And/Or with one operand behave like the operand."""
        assert evaluate(And(Threshold(1)), [0, 1, 0]) == 1
        assert evaluate(Or(Threshold(1)), [0, 0, 0]) == 0

    def test_lukasiewicz_norms(self):
        """Łukasiewicz conjunction and disjunction differ from Gödel's."""
        assert evaluate(And(Const(1), Const(1)), [0, 0, 0], 2, "godel") == 1
        assert evaluate(And(Const(1), Const(1)), [0, 0, 0], 2, "lukasiewicz") == 0
        assert evaluate(Or(Const(1), Const(1)), [0, 0, 0], 2, "godel") == 1
        assert evaluate(Or(Const(1), Const(1)), [0, 0, 0], 2, "lukasiewicz") == 2


class TestPartialStates:
    """Test resolution on partial (prefix) states."""

    def test_unresolved_when_dependency_missing(self):
        rule = compile_model(single_rule_model(Threshold(2)))[0]
        assert rule([1]) is UNRESOLVED
        assert rule([1, 0]) is UNRESOLVED
        assert rule([1, 0, 1]) == 1

    def test_constant_resolves_on_empty_state(self):
        rule = compile_model(single_rule_model(Const(1)))[0]
        assert rule([]) == 1

    def test_resolution_depth(self):
        """Resolution depth is the deepest of the owner and its inputs."""
        model = Model(
            (
                Species(0, "A", 1, Threshold(2)),
                Species(1, "B", 1, Threshold(0)),
                Species(2, "C", 1, Const(0)),
            )
        )
        rules = compile_model(model)
        assert [r.resolution_depth for r in rules] == [2, 1, 2]
        assert rules[0].dependencies == frozenset({2})

    def test_is_fixed(self):
        rule = compile_model(single_rule_model(Threshold(1)))[0]
        assert rule.is_fixed([1, 1, 0])
        assert not rule.is_fixed([0, 1, 0])
        assert not rule.is_fixed([1])


class TestCompileErrors:
    """Test rejection of malformed rules before any search."""

    def test_unknown_species_index(self):
        with pytest.raises(CompileError, match="unknown species index 5"):
            compile_model(single_rule_model(Threshold(5)))

    def test_negative_species_index(self):
        with pytest.raises(CompileError, match="unknown species index"):
            compile_model(single_rule_model(Not(Threshold(-1))))

    def test_constant_above_bound(self):
        with pytest.raises(CompileError, match="outside"):
            compile_model(single_rule_model(Const(2), upper_bound=1))

    def test_negative_constant(self):
        with pytest.raises(CompileError, match="outside"):
            compile_model(single_rule_model(Or(Threshold(1), Const(-1))))

    def test_empty_composite(self):
        with pytest.raises(CompileError, match="AND without operands"):
            compile_model(single_rule_model(And()))
        with pytest.raises(CompileError, match="OR without operands"):
            compile_model(single_rule_model(Or()))

    def test_non_integer_threshold(self):
        """Thresholds that could only fail during the search are rejected up front."""
        with pytest.raises(CompileError, match="not an integer level"):
            compile_model(single_rule_model(Threshold(1, ">=", "1")))
        with pytest.raises(CompileError, match="not an integer level"):
            compile_model(single_rule_model(Threshold(1, ">=", None)))
        with pytest.raises(CompileError, match="not an integer level"):
            compile_model(single_rule_model(Threshold(1, ">=", True)))

    def test_boolean_species_index(self):
        with pytest.raises(CompileError, match="unknown species index True"):
            compile_model(single_rule_model(Threshold(True)))

    def test_unknown_comparison(self):
        with pytest.raises(CompileError, match="Unknown comparison"):
            compile_model(single_rule_model(Threshold(1, "=~", 1)))

    def test_unsupported_node(self):
        with pytest.raises(CompileError, match="Unsupported node"):
            compile_model(single_rule_model("S1"))

    def test_unknown_logic(self):
        with pytest.raises(ValueError, match="Unknown logic"):
            RuleCompiler("product")  # type: ignore[arg-type]


class TestLevelLogic:
    """Test the norm functions directly."""

    def test_godel(self):
        assert LevelLogic.godel_and(2, 1, 3) == 1
        assert LevelLogic.godel_or(2, 1, 3) == 2

    def test_lukasiewicz(self):
        assert LevelLogic.lukasiewicz_and(2, 2, 3) == 1
        assert LevelLogic.lukasiewicz_or(2, 2, 3) == 3

    def test_boolean_collapse(self):
        """With top == 1 both norm pairs reduce to Boolean AND/OR."""
        for a in (0, 1):
            for b in (0, 1):
                assert LevelLogic.lukasiewicz_and(a, b, 1) == (a and b)
                assert LevelLogic.lukasiewicz_or(a, b, 1) == (a or b)
                assert LevelLogic.godel_and(a, b, 1) == (a and b)

    def test_negate(self):
        assert LevelLogic.negate(1, 3) == 2
