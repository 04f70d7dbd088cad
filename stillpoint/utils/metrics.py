"""Utility functions for summarising collections of steady states."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

import numpy as np

from stillpoint.core.model import Model
from stillpoint.core.types import State
from stillpoint.solver.compiler import CompiledRule
from stillpoint.solver.engine import SearchStatistics


def states_to_array(states: Iterable[State], species_count: int) -> np.ndarray:
    """
    Stack steady states into an integer matrix.

    Args:
        states: Steady states, each with ``species_count`` levels
        species_count: Number of species (columns)

    Returns:
        Array of shape [num_states, species_count]
    """
    rows = [tuple(state) for state in states]
    if not rows:
        return np.zeros((0, species_count), dtype=np.int64)

    array = np.asarray(rows, dtype=np.int64).reshape(len(rows), species_count)
    return array


def level_frequencies(states: np.ndarray, bounds: Sequence[int]) -> list[np.ndarray]:
    """
    Count how often each level of each species occurs.

    Returns:
        One array per species of length ``bound + 1``
    """
    return [
        np.bincount(states[:, index], minlength=bound + 1)
        for index, bound in enumerate(bounds)
    ]


def rule_agreement(states: np.ndarray, rules: Sequence[CompiledRule]) -> np.ndarray:
    """
    Check each state against each rule.

    Returns:
        Boolean array [num_states, num_rules], True where the rule holds
        its species at the level the state gives it
    """
    agreement = np.zeros((states.shape[0], len(rules)), dtype=bool)
    for row, state in enumerate(states.tolist()):
        for column, rule in enumerate(rules):
            agreement[row, column] = rule.is_fixed(state)
    return agreement


def pairwise_distances(states: np.ndarray) -> np.ndarray:
    """Hamming distances (number of differing species) between steady states."""
    if states.shape[0] == 0:
        return np.zeros((0, 0), dtype=np.int64)
    return (states[:, None, :] != states[None, :, :]).sum(axis=2)


def steady_state_summary(
    states: Iterable[State],
    model: Model,
    statistics: SearchStatistics | None = None,
) -> dict[str, Any]:
    """
    Compute summary metrics for the steady states of a model.

    Args:
        states: Steady states found for ``model``
        model: The model they belong to
        statistics: Optional search counters to report pruning efficiency

    Returns:
        Dictionary of summary metrics
    """
    array = states_to_array(states, len(model.species))
    count = int(array.shape[0])
    names = model.names

    summary: dict[str, Any] = {
        "model": model.name,
        "species": len(names),
        "steady_states": count,
        "state_space_size": model.state_space_size(),
    }

    if count and names:
        constant = np.all(array == array[0], axis=0)
        summary["mean_levels"] = dict(zip(names, array.mean(axis=0).tolist()))
        summary["fixed_species"] = [n for n, c in zip(names, constant.tolist()) if c]
        summary["fixed_fraction"] = float(constant.mean())
    else:
        summary["mean_levels"] = {}
        summary["fixed_species"] = []
        summary["fixed_fraction"] = 0.0

    if count > 1:
        distances = pairwise_distances(array)
        upper = distances[np.triu_indices(count, k=1)]
        summary["min_distance"] = int(upper.min())
        summary["mean_distance"] = float(upper.mean())

    if statistics is not None:
        summary.update(statistics.to_dict())
        summary["search_effort"] = statistics.candidates / summary["state_space_size"]
        summary["prune_rate"] = (
            statistics.pruned / statistics.candidates if statistics.candidates else 0.0
        )

    return summary


def print_steady_state_summary(summary: dict[str, Any]) -> None:
    """
    Print a text summary produced by ``steady_state_summary``.

    Args:
        summary: Summary dictionary
    """
    print("=" * 60)
    print(f"STEADY STATES OF {summary['model'].upper()}")
    print("=" * 60)

    print(f"\nSpecies: {summary['species']}")
    print(f"State space: {summary['state_space_size']} assignments")
    print(f"Steady states: {summary['steady_states']}")

    if summary["fixed_species"]:
        print(f"Fixed in every steady state: {', '.join(summary['fixed_species'])}")

    if "mean_distance" in summary:
        print(
            f"Hamming distance between steady states: "
            f"min {summary['min_distance']}, mean {summary['mean_distance']:.2f}"
        )

    if "candidates" in summary:
        print(f"\nCandidates tried: {summary['candidates']}")
        print(f"Pruned: {summary['pruned']} ({summary['prune_rate']:.1%})")
        print(f"Candidates per state space assignment: {summary['search_effort']:.2f}")

    print("=" * 60)
