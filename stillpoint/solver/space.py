"""Domain store recording per-species bounds and compiled rules."""

from __future__ import annotations

from stillpoint.core.model import Model
from stillpoint.core.types import ConsistencyError, LogicType, RangeError
from stillpoint.solver.compiler import CompiledRule, RuleCompiler


class SteadySpace:
    """
    Search space of steady states.

    Holds the inclusive domain ``[0, max]`` of every species and the
    compiled rules they have to satisfy. The store is filled in two steps:
    every species is bounded with ``bound_specie``, then ``apply_model``
    attaches the rules. No search happens here.
    """

    def __init__(self, species_count: int, global_max: int):
        if species_count < 0:
            raise RangeError(f"species_count must be non-negative, got {species_count}")
        if global_max < 0:
            raise RangeError(f"global_max must be non-negative, got {global_max}")

        self.species_count = species_count
        self.global_max = global_max
        self._bounds: list[int | None] = [None] * species_count
        self._rules: list[CompiledRule] | None = None

    @classmethod
    def from_model(cls, model: Model, logic: LogicType = "godel") -> SteadySpace:
        """Create a store with every species bounded and the model applied."""
        space = cls(len(model.species), model.global_max)
        for specie in model.species:
            space.bound_specie(specie.index, specie.upper_bound)
        space.apply_model(model, logic)
        return space

    def bound_specie(self, index: int, max_value: int) -> None:
        """
        Record the inclusive domain ``[0, max_value]`` of a species.

        Raises:
            RangeError: If the index or the bound is out of range
            ConsistencyError: If the species was already bounded
        """
        if not 0 <= index < self.species_count:
            raise RangeError(
                f"Species index {index} outside [0, {self.species_count})"
            )
        if not 0 <= max_value <= self.global_max:
            raise RangeError(
                f"Bound {max_value} of species {index} outside [0, {self.global_max}]"
            )
        if self._bounds[index] is not None:
            raise ConsistencyError(f"Species {index} is already bounded")

        self._bounds[index] = max_value

    def apply_model(self, model: Model, logic: LogicType = "godel") -> None:
        """
        Compile the model's rules and attach them to the store.

        Raises:
            ConsistencyError: If the model does not match the recorded bounds
            CompileError: If a rule fails to compile
        """
        bounded = self.bounded_count
        if len(model.species) != bounded or bounded != self.species_count:
            raise ConsistencyError(
                f"Model has {len(model.species)} species but {bounded} of "
                f"{self.species_count} are bounded"
            )

        for specie in model.species:
            if self._bounds[specie.index] != specie.upper_bound:
                raise ConsistencyError(
                    f"Species {specie.name} declares bound {specie.upper_bound} "
                    f"but {self._bounds[specie.index]} was recorded"
                )

        self._rules = RuleCompiler(logic).compile(model)

    @property
    def bounded_count(self) -> int:
        """Number of species whose bound has been recorded."""
        return sum(1 for bound in self._bounds if bound is not None)

    @property
    def prepared(self) -> bool:
        """All species bounded and rules attached."""
        return self._rules is not None and self.bounded_count == self.species_count

    @property
    def bounds(self) -> list[int]:
        """Recorded upper bounds in index order."""
        if self.bounded_count != self.species_count:
            raise ConsistencyError("Not every species has been bounded")
        return [bound for bound in self._bounds if bound is not None]

    @property
    def rules(self) -> list[CompiledRule]:
        """Compiled rules in index order."""
        if self._rules is None:
            raise ConsistencyError("No model has been applied")
        return list(self._rules)

    def __repr__(self) -> str:
        return (
            f"SteadySpace(species={self.species_count}, "
            f"bounded={self.bounded_count}, prepared={self.prepared})"
        )
