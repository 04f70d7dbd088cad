"""Triangular norms over integer levels."""

from collections.abc import Callable

from stillpoint.core.types import LogicType

LevelNorm = Callable[[int, int, int], int]


class LevelLogic:
    """
    Multi-valued logic operations on levels in ``[0, top]``.

    ``top`` is the upper bound of the species owning the rule, so a rule
    always produces a level its own species can take. With ``top == 1``
    every norm pair collapses to Boolean logic.
    """

    @staticmethod
    def godel_and(a: int, b: int, top: int) -> int:
        """
        Gödel t-norm: T(a,b) = min(a, b)

        The weakest operand dominates.
        """
        return min(a, b)

    @staticmethod
    def godel_or(a: int, b: int, top: int) -> int:
        """Gödel s-norm: S(a,b) = max(a, b)"""
        return max(a, b)

    @staticmethod
    def lukasiewicz_and(a: int, b: int, top: int) -> int:
        """
        Łukasiewicz t-norm: T(a,b) = max(0, a + b - top)

        Both operands have to be high for the result to be high.
        """
        return max(0, a + b - top)

    @staticmethod
    def lukasiewicz_or(a: int, b: int, top: int) -> int:
        """Łukasiewicz s-norm: S(a,b) = min(top, a + b)"""
        return min(top, a + b)

    @staticmethod
    def negate(a: int, top: int) -> int:
        """Standard negation: N(a) = top - a"""
        return top - a

    @classmethod
    def get_norms(cls, logic: LogicType) -> tuple[LevelNorm, LevelNorm]:
        """
        Get the (t-norm, s-norm) pair by name.

        Args:
            logic: Name of the logic to retrieve

        Returns:
            Conjunction and disjunction functions

        Raises:
            ValueError: If logic is not recognized
        """
        norm_map = {
            "godel": (cls.godel_and, cls.godel_or),
            "lukasiewicz": (cls.lukasiewicz_and, cls.lukasiewicz_or),
        }

        if logic not in norm_map:
            available = list(norm_map.keys())
            raise ValueError(f"Unknown logic: {logic}. Available: {available}")

        return norm_map[logic]
