"""Domain-specific language for model definition."""

from __future__ import annotations

from dataclasses import dataclass

from stillpoint.core.expressions import Const, Expression, Threshold
from stillpoint.core.model import Model, Species
from stillpoint.core.types import ModelError


@dataclass(frozen=True)
class SpeciesRef:
    """
    Handle to a species declared in a ``ModelBuilder``.

    Comparisons against integers produce ``Threshold`` nodes, so rules can
    be written with the species handles directly.
    """

    index: int
    name: str

    def __ge__(self, value: int) -> Threshold:  # type: ignore[override]
        return Threshold(self.index, ">=", value)

    def __gt__(self, value: int) -> Threshold:  # type: ignore[override]
        return Threshold(self.index, ">", value)

    def __le__(self, value: int) -> Threshold:  # type: ignore[override]
        return Threshold(self.index, "<=", value)

    def __lt__(self, value: int) -> Threshold:  # type: ignore[override]
        return Threshold(self.index, "<", value)

    def at(self, value: int) -> Threshold:
        """Exact level comparison; ``==`` stays reserved for identity."""
        return Threshold(self.index, "==", value)

    def not_at(self, value: int) -> Threshold:
        return Threshold(self.index, "!=", value)

    @property
    def on(self) -> Threshold:
        """Shorthand for ``self >= 1``."""
        return Threshold(self.index, ">=", 1)


class ModelBuilder:
    """
    Fluent interface for declaring species and their rules.

    Species are declared first so that rules can refer to any of them,
    including species declared later.

    Example:
        >>> builder = ModelBuilder("toggle")
        >>> a = builder.species("A", 1)
        >>> b = builder.species("B", 1)
        >>> _ = builder.rule(a, ~b.on).rule(b, ~a.on)
        >>> model = builder.build()
    """

    def __init__(self, name: str = "model") -> None:
        self.name = name
        self._names: list[str] = []
        self._bounds: list[int] = []
        self._rules: dict[int, Expression] = {}

    def species(self, name: str, upper_bound: int = 1) -> SpeciesRef:
        """
        Declare a species.

        Args:
            name: Unique species name
            upper_bound: Highest level the species can take

        Returns:
            Handle used to reference the species in rules
        """
        if name in self._names:
            raise ModelError(f"Duplicate species name: {name}")
        if upper_bound < 0:
            raise ModelError(
                f"Upper bound of {name} must be non-negative, got {upper_bound}"
            )

        self._names.append(name)
        self._bounds.append(upper_bound)
        return SpeciesRef(len(self._names) - 1, name)

    def rule(self, target: SpeciesRef, expression: Expression | int) -> ModelBuilder:
        """
        Set the update rule of a species.

        Args:
            target: Species whose rule is being set
            expression: Rule expression, or an integer for a constant level

        Returns:
            Self for method chaining
        """
        if isinstance(expression, int):
            expression = Const(expression)
        self._rules[target.index] = expression
        return self

    def ref(self, name: str) -> SpeciesRef:
        """Look up the handle of an already declared species."""
        return SpeciesRef(self._names.index(name), name)

    def build(self) -> Model:
        """
        Build the final Model.

        Species without an explicit rule keep their level: their rule is
        the identity ``self >= 1`` for Boolean species, which makes both
        levels steady.

        Returns:
            Immutable model
        """
        species = []
        for index, (name, bound) in enumerate(zip(self._names, self._bounds)):
            rule = self._rules.get(index)
            if rule is None:
                if bound > 1:
                    raise ModelError(f"Multi-valued species {name} has no rule")
                rule = Threshold(index, ">=", 1)
            species.append(Species(index, name, bound, rule))
        return Model(tuple(species), name=self.name)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"ModelBuilder({self.name!r}, species={len(self._names)})"
