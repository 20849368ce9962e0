"""Lambda calculus target: expressions, translation τ, normal-order evaluation."""

from .expr import (
    LambdaExpr,
    Var,
    Const,
    Lam,
    App,
    Prim,
    free_vars,
    expr_size,
    substitute,
)
from .translator import Translator, tau
from .evaluator import LambdaStep, LambdaResult, LambdaEvaluator

__all__ = [
    "LambdaExpr",
    "Var",
    "Const",
    "Lam",
    "App",
    "Prim",
    "free_vars",
    "expr_size",
    "substitute",
    "Translator",
    "tau",
    "LambdaStep",
    "LambdaResult",
    "LambdaEvaluator",
]
