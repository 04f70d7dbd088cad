"""Rule compilation and steady state search."""

from stillpoint.solver.compiler import UNRESOLVED, CompiledRule, RuleCompiler, compile_model
from stillpoint.solver.engine import SearchStatistics, SpaceSolver, iterate_limited, solve
from stillpoint.solver.space import SteadySpace

__all__ = [
    "UNRESOLVED",
    "CompiledRule",
    "RuleCompiler",
    "SearchStatistics",
    "SpaceSolver",
    "SteadySpace",
    "compile_model",
    "iterate_limited",
    "solve",
]
