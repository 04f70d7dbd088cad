"""Combinators for building rule expressions."""

from stillpoint.core.expressions import And, Const, Expression, Not, Or, Threshold


def all_of(*expressions: Expression) -> Expression:
    """
    Combine expressions so that ALL of them must hold.

    Equivalent to expression1 & expression2 & ... & expressionN, flattened
    into a single ``And`` node.

    Args:
        *expressions: Variable number of expressions to combine

    Returns:
        The single expression when only one is given, otherwise an ``And``

    Example:
        >>> rule = all_of(Threshold(0), Threshold(2, "<", 1))
    """
    if not expressions:
        raise ValueError("At least one expression must be provided")

    if len(expressions) == 1:
        return expressions[0]

    return And(*expressions)


def any_of(*expressions: Expression) -> Expression:
    """
    Combine expressions so that ANY of them may hold.

    Equivalent to expression1 | expression2 | ... | expressionN, flattened
    into a single ``Or`` node.

    Args:
        *expressions: Variable number of expressions to combine

    Returns:
        The single expression when only one is given, otherwise an ``Or``
    """
    if not expressions:
        raise ValueError("At least one expression must be provided")

    if len(expressions) == 1:
        return expressions[0]

    return Or(*expressions)


def none_of(*expressions: Expression) -> Expression:
    """
    Combine expressions so that NONE of them may hold.

    Equivalent to ~(expression1 | expression2 | ... | expressionN).
    """
    if not expressions:
        raise ValueError("At least one expression must be provided")

    return Not(any_of(*expressions))


def active(species: int, level: int = 1) -> Threshold:
    """Species ``species`` is at ``level`` or above."""
    return Threshold(species, ">=", level)


def inactive(species: int, level: int = 1) -> Threshold:
    """Species ``species`` is below ``level``."""
    return Threshold(species, "<", level)


def at_level(species: int, level: int) -> Threshold:
    """Species ``species`` is exactly at ``level``."""
    return Threshold(species, "==", level)


def capped(level: int, expression: Expression) -> Expression:
    """Require at most ``level`` when ``expression`` holds, otherwise 0."""
    return And(Const(level), expression)
