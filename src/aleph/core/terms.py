"""
Term Model: the prime-indexed expression language.

Terms form a closed sum type. Every consumer (reduction, translation,
denotation, interpretation) dispatches over exactly these classes and raises
TypeError on anything else, so adding a constructor without a matching case
fails loudly.

Grammar:
    noun     := N(p) | FUSE(p, q, r) | A(p1)...A(pk) noun
    adj      := A(p)
    sentence := [noun] | sentence ∘ sentence | sentence ⇒ sentence

Design Principles:
1. Terms are immutable values; reduction always builds new terms
2. Primality and fusion well-formedness are checked at construction
3. Operator ordering (p < q) is NOT a construction check; it is a
   reduction-time outcome
4. term_size is the strong-normalization measure
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from aleph.core.primes import is_prime


class MalformedTermError(ValueError):
    """A term was constructed with an invalid field."""

    def __init__(self, term_kind: str, field: str, value: object, reason: str):
        self.term_kind = term_kind
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Malformed {term_kind}: {field}={value!r} ({reason})")


def _require_prime(term_kind: str, field: str, value: object) -> int:
    if not is_prime(value):
        raise MalformedTermError(term_kind, field, value, "not a prime number")
    return int(value)


# =============================================================================
# TERM CLASSES
# =============================================================================

@dataclass(frozen=True)
class Term:
    """
    Base class for all terms. Never instantiated directly.

    Composite terms (chains and sentence forms) compare, hash and print
    through their signature. The signature is rendered with an explicit stack
    and cached on the instance.
    """

    def signature(self) -> str:
        cached = self.__dict__.get("_signature")
        if cached is None:
            cached = _render(self)
            object.__setattr__(self, "_signature", cached)
        return cached

    def __str__(self) -> str:
        return self.signature()

    def __repr__(self) -> str:
        return f"{type(self).__name__}<{self.signature()}>"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.signature() == other.signature()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.signature()))


@dataclass(frozen=True)
class Noun(Term):
    """N(p): an irreducible value-carrying leaf."""
    prime: int

    def __post_init__(self):
        object.__setattr__(self, "prime", _require_prime("Noun", "prime", self.prime))


@dataclass(frozen=True)
class Adj(Term):
    """A(p): an operator application awaiting a target."""
    prime: int

    def __post_init__(self):
        object.__setattr__(self, "prime", _require_prime("Adj", "prime", self.prime))

    def can_apply_to(self, target: Term) -> bool:
        """True when target has a known prime q with p < q."""
        value = noun_value(target)
        return value is not None and self.prime < value


@dataclass(frozen=True, eq=False, repr=False)
class Chain(Term):
    """
    A(ops[0])...A(ops[k-1]) applied around base.

    ops[-1] is the innermost adjective and is applied to base first.
    """
    ops: Tuple[int, ...]
    base: Term

    def __post_init__(self):
        ops = tuple(self.ops)
        for idx, p in enumerate(ops):
            _require_prime("Chain", f"ops[{idx}]", p)
        object.__setattr__(self, "ops", tuple(int(p) for p in ops))
        if not is_noun_level(self.base):
            raise MalformedTermError("Chain", "base", self.base, "base must be a noun-level term")


@dataclass(frozen=True)
class Fuse(Term):
    """FUSE(p, q, r): an unresolved ternary combination of distinct primes."""
    p: int
    q: int
    r: int

    def __post_init__(self):
        for name in ("p", "q", "r"):
            object.__setattr__(self, name, _require_prime("Fuse", name, getattr(self, name)))
        if len({self.p, self.q, self.r}) != 3:
            raise MalformedTermError(
                "Fuse", "primes", (self.p, self.q, self.r), "primes must be pairwise distinct"
            )
        if not is_prime(self.fused_prime):
            raise MalformedTermError(
                "Fuse", "sum", self.fused_prime, "p + q + r must be prime"
            )

    @property
    def fused_prime(self) -> int:
        return self.p + self.q + self.r


@dataclass(frozen=True, eq=False, repr=False)
class Sentence(Term):
    """[t]: lifts a noun-level term to sentence level."""
    term: Term

    def __post_init__(self):
        if not is_noun_level(self.term):
            raise MalformedTermError("Sentence", "term", self.term, "must be a noun-level term")


@dataclass(frozen=True, eq=False, repr=False)
class Seq(Term):
    """S1 ∘ S2: sequential composition."""
    left: Term
    right: Term

    def __post_init__(self):
        for name in ("left", "right"):
            if not is_sentence_level(getattr(self, name)):
                raise MalformedTermError("Seq", name, getattr(self, name), "must be a sentence")


@dataclass(frozen=True, eq=False, repr=False)
class Impl(Term):
    """S1 ⇒ S2: implication."""
    antecedent: Term
    consequent: Term

    def __post_init__(self):
        for name in ("antecedent", "consequent"):
            if not is_sentence_level(getattr(self, name)):
                raise MalformedTermError("Impl", name, getattr(self, name), "must be a sentence")


NOUN_LEVEL = (Noun, Chain, Fuse)
SENTENCE_LEVEL = (Sentence, Seq, Impl)


def is_noun_level(term: object) -> bool:
    return isinstance(term, NOUN_LEVEL)


def is_sentence_level(term: object) -> bool:
    return isinstance(term, SENTENCE_LEVEL)


# =============================================================================
# SIGNATURES
# =============================================================================

def _leaf_signature(term: Term) -> Optional[str]:
    if isinstance(term, Noun):
        return f"N({term.prime})"
    if isinstance(term, Adj):
        return f"A({term.prime})"
    if isinstance(term, Fuse):
        return f"FUSE({term.p},{term.q},{term.r})"
    return None


def _compose(term: Term, parts: Sequence[str]) -> str:
    if isinstance(term, Chain):
        if not term.ops:
            return f"CHAIN([],{parts[0]})"
        prefix = "".join(f"A({p})" for p in term.ops)
        if isinstance(term.base, Chain):
            return f"{prefix}({parts[0]})"
        return f"{prefix}{parts[0]}"
    if isinstance(term, Sentence):
        return f"[{parts[0]}]"
    if isinstance(term, Seq):
        return f"({parts[0]} ∘ {parts[1]})"
    if isinstance(term, Impl):
        return f"({parts[0]} ⇒ {parts[1]})"
    raise TypeError(f"Unhandled term type: {type(term).__name__}")


def _render(term: Term) -> str:
    """Post-order rendering of a signature; reuses any cached subterm signature."""
    rendered: List[str] = []
    stack: List[Tuple[Term, bool]] = [(term, False)]
    while stack:
        node, expanded = stack.pop()
        cached = node.__dict__.get("_signature")
        if cached is not None:
            rendered.append(cached)
            continue
        leaf = _leaf_signature(node)
        if leaf is not None:
            rendered.append(leaf)
        elif not expanded:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(children(node)))
        else:
            arity = len(children(node))
            parts = rendered[-arity:]
            del rendered[-arity:]
            rendered.append(_compose(node, parts))
    return rendered[0]


# =============================================================================
# CONSTRUCTORS
# =============================================================================

def N(p: int) -> Noun:
    return Noun(p)


def A(p: int) -> Adj:
    return Adj(p)


def FUSE(p: int, q: int, r: int) -> Fuse:
    return Fuse(p, q, r)


def CHAIN(ops: Iterable[int], base: Term) -> Chain:
    return Chain(tuple(ops), base)


def SENTENCE(term: Term) -> Sentence:
    return Sentence(term)


def SEQ(s1: Term, s2: Term) -> Seq:
    return Seq(s1, s2)


def IMPL(s1: Term, s2: Term) -> Impl:
    return Impl(s1, s2)


# =============================================================================
# STRUCTURAL HELPERS
# =============================================================================

def children(term: Term) -> Sequence[Term]:
    """Immediate subterms, left to right."""
    if isinstance(term, (Noun, Adj, Fuse)):
        return ()
    if isinstance(term, Chain):
        return (term.base,)
    if isinstance(term, Sentence):
        return (term.term,)
    if isinstance(term, Seq):
        return (term.left, term.right)
    if isinstance(term, Impl):
        return (term.antecedent, term.consequent)
    raise TypeError(f"Unhandled term type: {type(term).__name__}")


def _own_size(term: Term) -> int:
    if isinstance(term, (Noun, Adj)):
        return 1
    if isinstance(term, Fuse):
        return 4
    if isinstance(term, Chain):
        return len(term.ops)
    if isinstance(term, (Sentence, Seq, Impl)):
        return 1
    raise TypeError(f"Unhandled term type: {type(term).__name__}")


def term_size(term: Term) -> int:
    """
    Structural size used as the strong-normalization measure.

    N=1, A=1, FUSE=4, chain = len(ops) + |base|, sentence forms add 1.
    Every reduction step strictly decreases this value.
    """
    total = 0
    stack: List[Term] = [term]
    while stack:
        node = stack.pop()
        total += _own_size(node)
        stack.extend(children(node))
    return total


def noun_value(term: Term) -> Optional[int]:
    """Prime carried by a noun in normal form (N(p), CHAIN([], N(p)), ...), else None."""
    node = term
    while isinstance(node, Chain) and not node.ops:
        node = node.base
    if isinstance(node, Noun):
        return node.prime
    return None


def sentences_of(term: Term) -> List[Sentence]:
    """Sentence leaves of a discourse, left to right."""
    out: List[Sentence] = []
    stack: List[Term] = [term]
    while stack:
        node = stack.pop()
        if isinstance(node, Sentence):
            out.append(node)
        elif isinstance(node, (Seq, Impl)):
            stack.extend(reversed(children(node)))
    return out


def discourse_state(term: Term) -> List[Optional[int]]:
    """
    Ordered primes asserted by the sentences of a discourse.

    Sentences whose inner term is not yet a normal-form noun contribute None.
    """
    return [noun_value(s.term) for s in sentences_of(term)]


__all__ = [
    "MalformedTermError",
    "Term",
    "Noun",
    "Adj",
    "Chain",
    "Fuse",
    "Sentence",
    "Seq",
    "Impl",
    "NOUN_LEVEL",
    "SENTENCE_LEVEL",
    "is_noun_level",
    "is_sentence_level",
    "N",
    "A",
    "FUSE",
    "CHAIN",
    "SENTENCE",
    "SEQ",
    "IMPL",
    "children",
    "term_size",
    "noun_value",
    "sentences_of",
    "discourse_state",
]
