"""Core model types and rule expressions."""

from stillpoint.core.dsl import ModelBuilder
from stillpoint.core.expressions import And, Const, Expression, Not, Or, Threshold
from stillpoint.core.model import Model, Species
from stillpoint.core.types import SearchConfig

__all__ = [
    "And",
    "Const",
    "Expression",
    "Model",
    "ModelBuilder",
    "Not",
    "Or",
    "SearchConfig",
    "Species",
    "Threshold",
]
