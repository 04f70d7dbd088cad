"""Immutable regulatory network model."""

from __future__ import annotations

from dataclasses import dataclass, field

from stillpoint.core.expressions import Expression, format_expression
from stillpoint.core.types import ModelError


@dataclass(frozen=True)
class Species:
    """A modelled entity with a bounded integer level and an update rule."""

    index: int
    name: str
    upper_bound: int
    rule: Expression

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ModelError(f"Species index must be non-negative, got {self.index}")

        if self.upper_bound < 0:
            raise ModelError(
                f"Upper bound of {self.name} must be non-negative, got {self.upper_bound}"
            )

        if not self.name:
            raise ModelError("Species name must not be empty")


@dataclass(frozen=True)
class Model:
    """
    Ordered collection of species.

    The order of ``species`` is fixed at construction and every rule refers
    to other species by their position in it. Aggregates such as
    ``global_max`` are derived once here.

    Example:
        >>> model = Model((Species(0, "A", 1, Const(1)),), name="toy")
        >>> model.global_max
        1
    """

    species: tuple[Species, ...]
    name: str = "model"
    global_max: int = field(init=False)
    _by_name: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        species = tuple(self.species)
        object.__setattr__(self, "species", species)

        by_name: dict[str, int] = {}
        for position, specie in enumerate(species):
            if specie.index != position:
                raise ModelError(
                    f"Species {specie.name} has index {specie.index} "
                    f"but sits at position {position}"
                )
            if specie.name in by_name:
                raise ModelError(f"Duplicate species name: {specie.name}")
            by_name[specie.name] = position

        object.__setattr__(self, "_by_name", by_name)
        object.__setattr__(
            self, "global_max", max((s.upper_bound for s in species), default=0)
        )

    @property
    def names(self) -> list[str]:
        """Species names in index order."""
        return [s.name for s in self.species]

    @property
    def bounds(self) -> list[int]:
        """Upper bounds in index order."""
        return [s.upper_bound for s in self.species]

    def index_of(self, name: str) -> int:
        """Look up a species index by name."""
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"Unknown species: {name}") from None

    def state_space_size(self) -> int:
        """Number of assignments in the full product of species domains."""
        size = 1
        for bound in self.bounds:
            size *= bound + 1
        return size

    def describe(self) -> str:
        """Render the model in the model file syntax."""
        names = self.names
        return "\n".join(
            f"{s.name}:{s.upper_bound} = {format_expression(s.rule, names)}"
            for s in self.species
        )

    def __len__(self) -> int:
        return len(self.species)
