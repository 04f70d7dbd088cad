"""Utility functions for steady state analysis."""

from stillpoint.utils.metrics import (
    level_frequencies,
    states_to_array,
    steady_state_summary,
)

__all__ = ["level_frequencies", "states_to_array", "steady_state_summary"]
