"""Core type definitions, error classes and configuration with runtime validation."""

from dataclasses import dataclass
from typing import Literal

State = tuple[int, ...]
"""A full assignment of levels, one per species index."""

LogicType = Literal["godel", "lukasiewicz"]


class StillpointError(Exception):
    """Base class for all errors raised by stillpoint."""

    pass


class ModelError(StillpointError):
    """Raised when a model or species is constructed inconsistently."""

    pass


class CompileError(StillpointError):
    """Raised when a rule expression cannot be compiled into an evaluator."""

    pass


class RangeError(StillpointError, ValueError):
    """Raised when a species index or bound lies outside its allowed range."""

    pass


class ConsistencyError(StillpointError):
    """Raised when the domain store and the model disagree."""

    pass


class ModelFileError(StillpointError):
    """Raised when a model file cannot be located or read."""

    pass


class ModelSyntaxError(ModelFileError):
    """Raised when the text of a model does not follow the model syntax."""

    def __init__(self, message: str, line_number: int | None = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class ValidationError(StillpointError):
    """Raised when configuration validation fails."""

    pass


class InvariantViolation(RuntimeError):
    """Raised when the search engine detects a broken internal invariant."""

    pass


def validate_state(state: State, bounds: list[int] | tuple[int, ...]) -> State:
    """Validate that a state has one level per species, each within its bound."""
    if len(state) != len(bounds):
        raise ValidationError(
            f"Expected state of length {len(bounds)}, got {len(state)}"
        )

    for index, (level, bound) in enumerate(zip(state, bounds)):
        if not 0 <= level <= bound:
            raise ValidationError(
                f"Level {level} of species {index} outside [0, {bound}]"
            )

    return state


@dataclass
class SearchConfig:
    """Configuration for a steady state search with validation."""

    max_results: int | None = None
    time_budget: float | None = None
    logic: LogicType = "godel"
    verify_results: bool = True

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.max_results is not None and self.max_results <= 0:
            raise ValidationError(
                f"max_results must be positive, got {self.max_results}"
            )

        if self.time_budget is not None and self.time_budget <= 0.0:
            raise ValidationError(
                f"time_budget must be positive, got {self.time_budget}"
            )

        if self.logic not in ("godel", "lukasiewicz"):
            raise ValidationError(f"Unknown logic: {self.logic}")
