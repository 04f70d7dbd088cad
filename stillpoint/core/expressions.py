"""Rule expressions as a closed tagged variant.

A rule is a small tree built from exactly five node kinds: ``Const``,
``Threshold``, ``And``, ``Or`` and ``Not``. Every function walking a tree
does so with one ``match`` statement whose last case rejects anything else,
so a new node kind cannot slip through unnoticed.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Union

COMPARATORS: dict[str, Callable[[int, int], bool]] = {
    ">=": operator.ge,
    ">": operator.gt,
    "<=": operator.le,
    "<": operator.lt,
    "==": operator.eq,
    "!=": operator.ne,
}


class _Composable:
    """Operator sugar shared by all node kinds."""

    def __and__(self, other: Expression) -> And:
        """Logical AND of two expressions."""
        return And(self, other)  # type: ignore[arg-type]

    def __or__(self, other: Expression) -> Or:
        """Logical OR of two expressions."""
        return Or(self, other)  # type: ignore[arg-type]

    def __invert__(self) -> Not:
        """Logical NOT of an expression."""
        return Not(self)  # type: ignore[arg-type]


@dataclass(frozen=True)
class Const(_Composable):
    """A constant required level."""

    level: int


@dataclass(frozen=True)
class Threshold(_Composable):
    """Comparison of another species' current level against a threshold."""

    species: int
    op: str = ">="
    value: int = 1


@dataclass(frozen=True, init=False)
class And(_Composable):
    """Conjunction of one or more expressions."""

    operands: tuple[Expression, ...]

    def __init__(self, *operands: Expression):
        object.__setattr__(self, "operands", tuple(operands))


@dataclass(frozen=True, init=False)
class Or(_Composable):
    """Disjunction of one or more expressions."""

    operands: tuple[Expression, ...]

    def __init__(self, *operands: Expression):
        object.__setattr__(self, "operands", tuple(operands))


@dataclass(frozen=True)
class Not(_Composable):
    """Negation of an expression."""

    operand: Expression


Expression = Union[Const, Threshold, And, Or, Not]


def dependencies(expression: Expression) -> frozenset[int]:
    """Collect the species indices an expression reads."""
    match expression:
        case Const():
            return frozenset()
        case Threshold(species=species):
            return frozenset((species,))
        case And(operands=operands) | Or(operands=operands):
            result: frozenset[int] = frozenset()
            for operand in operands:
                result |= dependencies(operand)
            return result
        case Not(operand=operand):
            return dependencies(operand)
        case _:
            raise TypeError(f"Not a rule expression: {expression!r}")


def format_expression(expression: Expression, names: Sequence[str]) -> str:
    """
    Render an expression in the model file syntax.

    Args:
        expression: Expression to render
        names: Species names indexed by species index

    Returns:
        Text that parses back into an equivalent expression
    """
    match expression:
        case Const(level=level):
            return str(level)
        case Threshold(species=species, op=op, value=value):
            return f"{names[species]} {op} {value}"
        case And(operands=operands):
            return " & ".join(_format_operand(o, names) for o in operands)
        case Or(operands=operands):
            return " | ".join(_format_operand(o, names) for o in operands)
        case Not(operand=operand):
            return f"!{_format_operand(operand, names)}"
        case _:
            raise TypeError(f"Not a rule expression: {expression!r}")


def _format_operand(expression: Expression, names: Sequence[str]) -> str:
    if isinstance(expression, (Const, Not)):
        return format_expression(expression, names)
    return f"({format_expression(expression, names)})"
