"""Resumable backtracking search for steady states."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass

from stillpoint.core.model import Model
from stillpoint.core.types import (
    ConsistencyError,
    InvariantViolation,
    SearchConfig,
    State,
    validate_state,
)
from stillpoint.solver.compiler import UNRESOLVED, CompiledRule
from stillpoint.solver.space import SteadySpace

logger = logging.getLogger(__name__)


@dataclass
class SearchStatistics:
    """Counters collected while the search runs."""

    candidates: int = 0  # Candidate levels placed on the frontier
    pruned: int = 0  # Candidates rejected by a resolved rule
    verified: int = 0  # Complete states submitted to final verification
    found: int = 0  # Steady states returned

    def to_dict(self) -> dict[str, int]:
        """Convert statistics to dictionary for logging/reporting."""
        return {
            "candidates": self.candidates,
            "pruned": self.pruned,
            "verified": self.verified,
            "found": self.found,
        }


class _Cursor:
    """Frontier entry: the last candidate tried at one depth."""

    __slots__ = ("candidate", "upper_bound")

    def __init__(self, upper_bound: int):
        self.candidate = -1
        self.upper_bound = upper_bound

    @property
    def exhausted(self) -> bool:
        return self.candidate >= self.upper_bound

    def advance(self) -> int:
        self.candidate += 1
        return self.candidate


class SpaceSolver:
    """
    Enumerator of the steady states of a prepared ``SteadySpace``.

    Each call to ``next`` resumes a depth-first search from an explicit
    frontier (one cursor per species index) and returns the next steady
    state, or ``None`` once the search tree is exhausted. Depths follow the
    species order and candidates are tried in ascending order, so states
    come out in strictly increasing lexicographic order.

    A candidate at depth ``d`` is checked against every rule whose inputs
    and owner all sit at depth ``d`` or above; any disagreement prunes the
    whole subtree below it.

    Not reentrant: use one solver per thread.

    Example:
        >>> solver = SpaceSolver(SteadySpace.from_model(model))
        >>> for state in solver:
        ...     print(state)
    """

    def __init__(self, space: SteadySpace):
        if not space.prepared:
            raise ConsistencyError(f"Space is not prepared for search: {space!r}")

        self.species_count = space.species_count
        self._bounds = space.bounds
        self._rules = space.rules
        self._checks: list[list[CompiledRule]] = [[] for _ in range(self.species_count)]
        for rule in self._rules:
            self._checks[rule.resolution_depth].append(rule)

        self._frontier: list[_Cursor] = []
        self._state: list[int] = []
        if self.species_count:
            self._push(0)

        self._exhausted = False
        self.statistics = SearchStatistics()

    @property
    def exhausted(self) -> bool:
        """True once the search tree has been fully explored."""
        return self._exhausted

    @property
    def bounds(self) -> list[int]:
        return list(self._bounds)

    @property
    def rules(self) -> list[CompiledRule]:
        return list(self._rules)

    def next(self) -> State | None:
        """
        Continue the search up to the next steady state.

        Returns:
            A fresh tuple with one level per species, or ``None`` when no
            steady state is left. A model without species has exactly one
            steady state, the empty tuple.
        """
        if self._exhausted:
            return None

        if self.species_count == 0:
            self._exhausted = True
            self.statistics.found += 1
            return ()

        frontier = self._frontier
        state = self._state
        last = self.species_count - 1

        while frontier:
            depth = len(frontier) - 1
            if depth > last:
                raise InvariantViolation(
                    f"Frontier depth {depth + 1} exceeds species count {self.species_count}"
                )

            cursor = frontier[-1]
            if cursor.exhausted:
                frontier.pop()
                state.pop()
                continue

            candidate = cursor.advance()
            if not 0 <= candidate <= self._bounds[depth]:
                raise InvariantViolation(
                    f"Candidate {candidate} at depth {depth} outside "
                    f"[0, {self._bounds[depth]}]"
                )
            state[depth] = candidate
            self.statistics.candidates += 1

            if not self._consistent(depth):
                self.statistics.pruned += 1
                continue

            if depth < last:
                self._push(depth + 1)
                continue

            self.statistics.verified += 1
            if self._verify():
                self.statistics.found += 1
                return tuple(state)

        self._exhausted = True
        logger.debug("Search exhausted: %s", self.statistics.to_dict())
        return None

    def _push(self, depth: int) -> None:
        self._frontier.append(_Cursor(self._bounds[depth]))
        self._state.append(0)

    def _consistent(self, depth: int) -> bool:
        """Check the rules that become fully resolved at ``depth``."""
        state = self._state
        for rule in self._checks[depth]:
            required = rule(state)
            if required is UNRESOLVED:
                raise InvariantViolation(f"{rule!r} unresolved at depth {depth}")
            if required != state[rule.index]:
                return False
        return True

    def _verify(self) -> bool:
        state = self._state
        return all(rule(state) == state[rule.index] for rule in self._rules)

    def __iter__(self) -> Iterator[State]:
        return self

    def __next__(self) -> State:
        state = self.next()
        if state is None:
            raise StopIteration
        return state

    def __repr__(self) -> str:
        status = "exhausted" if self._exhausted else "active"
        return f"SpaceSolver(species={self.species_count}, {status}, found={self.statistics.found})"


def iterate_limited(
    solver: SpaceSolver, config: SearchConfig | None = None
) -> Iterator[State]:
    """
    Yield steady states from ``solver`` until it is exhausted or a limit of
    ``config`` is reached.

    Limits are checked between calls to ``next``; a single call is never
    interrupted.
    """
    config = config or SearchConfig()
    deadline = (
        time.monotonic() + config.time_budget if config.time_budget is not None else None
    )
    bounds = solver.bounds
    rules = solver.rules
    produced = 0

    while True:
        if config.max_results is not None and produced >= config.max_results:
            logger.info("Stopped after reaching max_results=%d", config.max_results)
            return
        if deadline is not None and time.monotonic() >= deadline:
            logger.info(
                "Stopped after exceeding time_budget=%.3fs with %d steady states",
                config.time_budget,
                produced,
            )
            return

        state = solver.next()
        if state is None:
            return

        if config.verify_results:
            validate_state(state, bounds)
            broken = [rule.name for rule in rules if not rule.is_fixed(state)]
            if broken:
                raise InvariantViolation(f"State {state} is not fixed for {broken}")

        produced += 1
        yield state


def solve(model: Model, config: SearchConfig | None = None) -> Iterator[State]:
    """
    Enumerate the steady states of a model.

    Args:
        model: Model to analyse
        config: Search limits and options

    Returns:
        Iterator over steady states in lexicographic order

    Raises:
        CompileError: If a rule of the model does not compile
    """
    config = config or SearchConfig()
    solver = SpaceSolver(SteadySpace.from_model(model, config.logic))
    return iterate_limited(solver, config)
