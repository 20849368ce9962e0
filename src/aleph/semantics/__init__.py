"""
Semantics module for aleph.

Provides the direct denotational evaluator and the concept interpreter.
"""

from .denotation import ValueKind, Value, SemanticAgreement, Semantics
from .concepts import ConceptInterpreter

__all__ = [
    "ValueKind",
    "Value",
    "SemanticAgreement",
    "Semantics",
    "ConceptInterpreter",
]
