"""
Aleph: a prime-indexed term language with executable semantics.

Subpackages:
    core:            primes, terms, parser, typing, prime operators
    reduction:       small-step reduction system, fusion canonicalization
    lambda_calculus: translation τ and the normal-order λ evaluator
    semantics:       denotational semantics and concept rendering
    evaluation:      NF_ok verification, normalization/confluence checks, audits
"""

__version__ = "0.1.0"
