"""Reduction system and fusion canonicalization."""

from .system import (
    ReductionRule,
    ReductionStrategy,
    StepResult,
    ReductionTrace,
    EvaluationResult,
    ReductionSystem,
    is_normal_form,
    is_reducible,
    normal_form_prime,
)
from .canonical import Triad, FusionCanonicalizer

__all__ = [
    "ReductionRule",
    "ReductionStrategy",
    "StepResult",
    "ReductionTrace",
    "EvaluationResult",
    "ReductionSystem",
    "is_normal_form",
    "is_reducible",
    "normal_form_prime",
    "Triad",
    "FusionCanonicalizer",
]
