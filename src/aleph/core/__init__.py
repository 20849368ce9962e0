"""
Aleph core: primes, terms and the prime operators.

Usage:
    from aleph.core import N, A, FUSE, CHAIN, SENTENCE, SEQ, IMPL, parse_term
"""

from .primes import is_prime, next_prime, primes_up_to
from .terms import (
    # Term model
    MalformedTermError,
    Term,
    Noun,
    Adj,
    Chain,
    Fuse,
    Sentence,
    Seq,
    Impl,
    # Constructors
    N,
    A,
    FUSE,
    CHAIN,
    SENTENCE,
    SEQ,
    IMPL,
    # Helpers
    is_noun_level,
    is_sentence_level,
    children,
    term_size,
    noun_value,
    sentences_of,
    discourse_state,
)
from .operators import (
    OperatorNotApplicableError,
    UnknownOperatorError,
    PrimeOperator,
    ResonancePrimeOperator,
    NextPrimeOperator,
    OPERATOR_REGISTRY,
    get_operator,
    list_operators,
    resolve_operator,
)
from .parser import TermParseError, TermParser, parse_term
from .type_system import TermType, TypingJudgment, TypeChecker

__all__ = [
    # Primes
    "is_prime",
    "next_prime",
    "primes_up_to",
    # Terms
    "MalformedTermError",
    "Term",
    "Noun",
    "Adj",
    "Chain",
    "Fuse",
    "Sentence",
    "Seq",
    "Impl",
    "N",
    "A",
    "FUSE",
    "CHAIN",
    "SENTENCE",
    "SEQ",
    "IMPL",
    "is_noun_level",
    "is_sentence_level",
    "children",
    "term_size",
    "noun_value",
    "sentences_of",
    "discourse_state",
    # Operators
    "OperatorNotApplicableError",
    "UnknownOperatorError",
    "PrimeOperator",
    "ResonancePrimeOperator",
    "NextPrimeOperator",
    "OPERATOR_REGISTRY",
    "get_operator",
    "list_operators",
    "resolve_operator",
    # Parsing and typing
    "TermParseError",
    "TermParser",
    "parse_term",
    "TermType",
    "TypingJudgment",
    "TypeChecker",
]
