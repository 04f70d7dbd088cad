"""Tests for the model types and the model builder."""

import pytest

from stillpoint.core.dsl import ModelBuilder
from stillpoint.core.expressions import Const, Not, Threshold
from stillpoint.core.model import Model, Species
from stillpoint.core.types import ModelError
from stillpoint.solver.engine import solve


class TestModel:
    """Test model construction and derived facts."""

    def test_global_max_is_cached(self):
        model = Model(
            (
                Species(0, "A", 1, Const(0)),
                Species(1, "B", 3, Const(0)),
            )
        )
        assert model.global_max == 3
        assert model.names == ["A", "B"]
        assert model.bounds == [1, 3]
        assert len(model) == 2

    def test_empty_model(self):
        model = Model(())
        assert model.global_max == 0
        assert model.state_space_size() == 1

    def test_state_space_size(self):
        model = Model(
            (
                Species(0, "A", 1, Const(0)),
                Species(1, "B", 2, Const(0)),
            )
        )
        assert model.state_space_size() == 6

    def test_model_is_frozen(self):
        model = Model((Species(0, "A", 1, Const(0)),))
        with pytest.raises(AttributeError):
            model.name = "other"  # type: ignore[misc]

    def test_index_must_match_position(self):
        with pytest.raises(ModelError, match="sits at position 0"):
            Model((Species(1, "A", 1, Const(0)),))

    def test_duplicate_names(self):
        with pytest.raises(ModelError, match="Duplicate species name"):
            Model((Species(0, "A", 1, Const(0)), Species(1, "A", 1, Const(0))))

    def test_negative_bound(self):
        with pytest.raises(ModelError, match="non-negative"):
            Species(0, "A", -1, Const(0))

    def test_index_of(self):
        model = Model((Species(0, "A", 1, Const(0)), Species(1, "B", 1, Const(0))))
        assert model.index_of("B") == 1
        with pytest.raises(KeyError, match="Unknown species"):
            model.index_of("C")

    def test_describe(self):
        model = Model(
            (
                Species(0, "A", 1, Not(Threshold(1))),
                Species(1, "B", 2, Const(2)),
            )
        )
        assert model.describe() == "A:1 = !(B >= 1)\nB:2 = 2"


class TestModelBuilder:
    """Test the fluent model builder."""

    def test_toggle_switch(self):
        builder = ModelBuilder("toggle")
        a = builder.species("A")
        b = builder.species("B")
        model = builder.rule(a, ~b.on).rule(b, ~a.on).build()

        assert model.name == "toggle"
        assert model.species[0].rule == Not(Threshold(1, ">=", 1))
        assert list(solve(model)) == [(0, 1), (1, 0)]

    def test_comparisons_build_thresholds(self):
        builder = ModelBuilder()
        a = builder.species("A", 3)
        assert (a >= 2) == Threshold(0, ">=", 2)
        assert (a > 2) == Threshold(0, ">", 2)
        assert (a <= 2) == Threshold(0, "<=", 2)
        assert (a < 2) == Threshold(0, "<", 2)
        assert a.at(1) == Threshold(0, "==", 1)
        assert a.not_at(1) == Threshold(0, "!=", 1)

    def test_integer_rule_becomes_constant(self):
        builder = ModelBuilder()
        a = builder.species("A", 2)
        model = builder.rule(a, 2).build()
        assert model.species[0].rule == Const(2)

    def test_boolean_species_default_to_identity(self):
        """Species without a rule keep whatever level they have."""
        builder = ModelBuilder()
        builder.species("A")
        assert list(solve(builder.build())) == [(0,), (1,)]

    def test_multivalued_species_need_a_rule(self):
        builder = ModelBuilder()
        builder.species("A", 2)
        with pytest.raises(ModelError, match="has no rule"):
            builder.build()

    def test_duplicate_species(self):
        builder = ModelBuilder()
        builder.species("A")
        with pytest.raises(ModelError, match="Duplicate"):
            builder.species("A")

    def test_ref(self):
        builder = ModelBuilder()
        builder.species("A")
        b = builder.species("B")
        assert builder.ref("B") == b
        assert len(builder) == 2
