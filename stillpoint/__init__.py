"""
Stillpoint: steady states of discrete multi-valued regulatory networks.

A model is a set of species, each held to an integer level in
``[0, upper_bound]`` and updated by a rule over the levels of other
species. Stillpoint enumerates every assignment of levels that all rules
leave unchanged, pruning partial assignments as soon as a rule is violated.
"""

__version__ = "0.1.0"
__author__ = "Stillpoint Team"

# Core exports
from stillpoint.core.dsl import ModelBuilder
from stillpoint.core.model import Model, Species
from stillpoint.core.types import SearchConfig
from stillpoint.formats.model_file import read_model
from stillpoint.solver.engine import SpaceSolver, solve
from stillpoint.solver.space import SteadySpace

__all__ = [
    "Model",
    "ModelBuilder",
    "SearchConfig",
    "SpaceSolver",
    "Species",
    "SteadySpace",
    "read_model",
    "solve",
]
