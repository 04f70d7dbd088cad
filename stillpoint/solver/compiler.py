"""Constraint compiler that turns rule expressions into level evaluators."""

from __future__ import annotations

import enum
import functools
from collections.abc import Callable, Sequence
from typing import Literal

from stillpoint.core.expressions import (
    COMPARATORS,
    And,
    Const,
    Expression,
    Not,
    Or,
    Threshold,
    dependencies,
)
from stillpoint.core.model import Model, Species
from stillpoint.core.types import CompileError, LogicType
from stillpoint.solver.norms import LevelLogic, LevelNorm

NodeEvaluator = Callable[[Sequence[int]], int]


class Resolution(enum.Enum):
    """Outcome of evaluating a rule on a state that lacks some of its inputs."""

    UNRESOLVED = "unresolved"


UNRESOLVED = Resolution.UNRESOLVED


def _is_level(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class CompiledRule:
    """
    Evaluator for the rule of a single species.

    Calling the rule with a (possibly partial) state returns the level the
    rule requires for its species, or ``UNRESOLVED`` when the state is a
    prefix too short to contain every species the rule reads. Partial
    states are always prefixes: position ``i`` holds the level of species
    ``i``.
    """

    def __init__(
        self,
        species: Species,
        evaluator: NodeEvaluator,
        dependencies: frozenset[int],
    ):
        self.index = species.index
        self.name = species.name
        self.upper_bound = species.upper_bound
        self.dependencies = dependencies
        self.resolution_depth = max(dependencies | {species.index})
        self._required_length = max(dependencies, default=-1) + 1
        self._evaluator = evaluator

    def __call__(self, state: Sequence[int]) -> int | Literal[Resolution.UNRESOLVED]:
        if len(state) < self._required_length:
            return UNRESOLVED
        return self._evaluator(state)

    def is_fixed(self, state: Sequence[int]) -> bool:
        """Check whether the rule holds its species at the level ``state`` gives it."""
        if len(state) <= self.resolution_depth:
            return False
        return self(state) == state[self.index]

    def __repr__(self) -> str:
        return (
            f"CompiledRule({self.name!r}, index={self.index}, "
            f"depends_on={sorted(self.dependencies)})"
        )


class RuleCompiler:
    """
    Compiler that converts a model's rule expressions into evaluators.

    Every expression is validated and translated once into a tree of
    closures, so the search loop never walks the expression tree itself.
    """

    def __init__(self, logic: LogicType = "godel"):
        self.logic = logic
        self._and, self._or = LevelLogic.get_norms(logic)

    def compile(self, model: Model) -> list[CompiledRule]:
        """
        Compile every species' rule.

        Args:
            model: Model whose rules to compile

        Returns:
            One compiled rule per species, in index order

        Raises:
            CompileError: If a rule is malformed or inconsistent with the model
        """
        species_count = len(model.species)
        return [
            CompiledRule(
                specie,
                self._compile_node(specie.rule, specie, species_count),
                dependencies(specie.rule),
            )
            for specie in model.species
        ]

    def _compile_node(
        self, expression: Expression, owner: Species, species_count: int
    ) -> NodeEvaluator:
        """Recursively translate an expression tree."""
        top = owner.upper_bound

        match expression:
            case Const(level=level):
                if not _is_level(level) or not 0 <= level <= top:
                    raise CompileError(
                        f"Constant {level!r} in the rule of {owner.name} "
                        f"lies outside [0, {top}]"
                    )
                return lambda state: level

            case Threshold(species=species, op=op, value=value):
                if not _is_level(species) or not 0 <= species < species_count:
                    raise CompileError(
                        f"Rule of {owner.name} references unknown species index {species!r}"
                    )
                if not _is_level(value):
                    raise CompileError(
                        f"Threshold {value!r} in the rule of {owner.name} is not an integer level"
                    )
                comparator = COMPARATORS.get(op)
                if comparator is None:
                    raise CompileError(
                        f"Unknown comparison {op!r} in the rule of {owner.name}"
                    )
                return lambda state: top if comparator(state[species], value) else 0

            case And(operands=operands):
                return self._compile_fold(operands, self._and, "AND", owner, species_count)

            case Or(operands=operands):
                return self._compile_fold(operands, self._or, "OR", owner, species_count)

            case Not(operand=operand):
                inner = self._compile_node(operand, owner, species_count)
                return lambda state: LevelLogic.negate(inner(state), top)

            case _:
                raise CompileError(
                    f"Unsupported node {expression!r} in the rule of {owner.name}"
                )

    def _compile_fold(
        self,
        operands: tuple[Expression, ...],
        norm: LevelNorm,
        label: str,
        owner: Species,
        species_count: int,
    ) -> NodeEvaluator:
        if not operands:
            raise CompileError(f"{label} without operands in the rule of {owner.name}")

        parts = [self._compile_node(o, owner, species_count) for o in operands]
        if len(parts) == 1:
            return parts[0]

        top = owner.upper_bound

        def evaluate(state: Sequence[int]) -> int:
            return functools.reduce(
                lambda acc, part: norm(acc, part(state), top), parts[1:], parts[0](state)
            )

        return evaluate


def compile_model(model: Model, logic: LogicType = "godel") -> list[CompiledRule]:
    """Compile a model with a fresh ``RuleCompiler``."""
    return RuleCompiler(logic).compile(model)
