"""
Lambda Expression AST.

A minimal untyped lambda calculus with integer constants and primitive
operators:

    e ::= x | c | λx.e | (e e) | op(e, ..., e)

Primitives are the only place arithmetic happens. A primitive fires (δ-step)
once all of its arguments are constants.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import count
from typing import Iterator, List, Set, Tuple


@dataclass(frozen=True)
class LambdaExpr:
    """Base class for lambda expressions."""

    def is_value(self) -> bool:
        return False

    def free_vars(self) -> Set[str]:
        return free_vars(self)


@dataclass(frozen=True)
class Var(LambdaExpr):
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Const(LambdaExpr):
    value: int

    def is_value(self) -> bool:
        return True

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Lam(LambdaExpr):
    param: str
    body: LambdaExpr

    def is_value(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"λ{self.param}.{self.body}"


@dataclass(frozen=True)
class App(LambdaExpr):
    fn: LambdaExpr
    arg: LambdaExpr

    def __str__(self) -> str:
        fn = f"({self.fn})" if isinstance(self.fn, Lam) else str(self.fn)
        return f"({fn} {self.arg})"


@dataclass(frozen=True)
class Prim(LambdaExpr):
    """op(args...): a primitive; prime operators print infix as (a ⊕ b)."""
    op: str
    args: Tuple[LambdaExpr, ...]

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))

    def __str__(self) -> str:
        if len(self.args) == 2:
            symbol = {"seq": "∘", "impl": "⇒"}.get(self.op, "⊕")
            return f"({self.args[0]} {symbol} {self.args[1]})"
        return f"{self.op}({', '.join(str(a) for a in self.args)})"


def subexpressions(expr: LambdaExpr) -> Tuple[LambdaExpr, ...]:
    if isinstance(expr, (Var, Const)):
        return ()
    if isinstance(expr, Lam):
        return (expr.body,)
    if isinstance(expr, App):
        return (expr.fn, expr.arg)
    if isinstance(expr, Prim):
        return expr.args
    raise TypeError(f"Unhandled expression type: {type(expr).__name__}")


def free_vars(expr: LambdaExpr) -> Set[str]:
    """Free variables, computed with an explicit stack."""
    free: Set[str] = set()
    stack: List[Tuple[LambdaExpr, frozenset]] = [(expr, frozenset())]
    while stack:
        node, bound = stack.pop()
        if isinstance(node, Var):
            if node.name not in bound:
                free.add(node.name)
        elif isinstance(node, Lam):
            stack.append((node.body, bound | {node.param}))
        else:
            for sub in subexpressions(node):
                stack.append((sub, bound))
    return free


def expr_size(expr: LambdaExpr) -> int:
    total = 0
    stack = [expr]
    while stack:
        node = stack.pop()
        total += 1
        stack.extend(subexpressions(node))
    return total


def fresh_names(prefix: str = "x") -> Iterator[str]:
    """x0, x1, x2, ..."""
    return (f"{prefix}{i}" for i in count())


def _fresh(avoid: Set[str], base: str) -> str:
    for candidate in fresh_names(f"{base}_"):
        if candidate not in avoid:
            return candidate
    raise RuntimeError("unreachable")


def substitute(expr: LambdaExpr, name: str, value: LambdaExpr) -> LambdaExpr:
    """
    Capture-avoiding substitution expr[name := value].

    A binder that would capture a free variable of value is renamed first.
    """
    if isinstance(expr, Var):
        return value if expr.name == name else expr
    if isinstance(expr, Const):
        return expr
    if isinstance(expr, App):
        return App(substitute(expr.fn, name, value), substitute(expr.arg, name, value))
    if isinstance(expr, Prim):
        return Prim(expr.op, tuple(substitute(a, name, value) for a in expr.args))
    if isinstance(expr, Lam):
        if expr.param == name:
            return expr
        value_free = free_vars(value)
        if expr.param in value_free:
            renamed = _fresh(value_free | free_vars(expr.body) | {name}, expr.param)
            body = substitute(expr.body, expr.param, Var(renamed))
            return Lam(renamed, substitute(body, name, value))
        return Lam(expr.param, substitute(expr.body, name, value))
    raise TypeError(f"Unhandled expression type: {type(expr).__name__}")


__all__ = [
    "LambdaExpr",
    "Var",
    "Const",
    "Lam",
    "App",
    "Prim",
    "subexpressions",
    "free_vars",
    "expr_size",
    "fresh_names",
    "substitute",
]
