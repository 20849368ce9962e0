"""
Shared constants across aleph modules.

This module is the single source of truth for:
- Operator names (registry keys)
- Reduction rule names
- Lambda primitive names
- Default step ceilings
- Default concept glosses (seed tables for ConceptInterpreter)
"""

# =============================================================================
# OPERATOR NAMES
# =============================================================================
# Registry keys for the prime-preserving binary operators

OPERATOR_RESONANCE = "resonance"
OPERATOR_NEXT_PRIME = "next_prime"

DEFAULT_OPERATOR = OPERATOR_RESONANCE


# =============================================================================
# REDUCTION RULE NAMES
# =============================================================================

RULE_FUSION = "fusion"
RULE_OPERATOR = "operator"
RULE_NORMAL_FORM = "normal_form"
RULE_OPERATOR_NOT_APPLICABLE = "operator_not_applicable"
RULE_UNSATURATED = "unsaturated"

# Rules that actually rewrite a term
REDUCING_RULES = {RULE_FUSION, RULE_OPERATOR}


# =============================================================================
# LAMBDA PRIMITIVES
# =============================================================================
# Sentence-level combinators used by the translator. Both are strict in
# both arguments and return the right operand.

PRIM_SEQ = "seq"
PRIM_IMPL = "impl"

SENTENCE_PRIMITIVES = {PRIM_SEQ, PRIM_IMPL}


# =============================================================================
# LIMITS
# =============================================================================

DEFAULT_MAX_REDUCTION_STEPS = 10_000
DEFAULT_MAX_LAMBDA_STEPS = 100_000


# =============================================================================
# CONCEPT GLOSSES
# =============================================================================
# Seed tables copied into each ConceptInterpreter instance. Never mutated.

DEFAULT_NOUN_CONCEPTS = {
    2: "duality",
    3: "structure",
    5: "change",
    7: "truth",
    11: "light",
    13: "harmony",
    17: "wisdom",
    19: "life",
    23: "consciousness",
    29: "creation",
    31: "spirit",
    37: "order",
    41: "memory",
    43: "time",
    47: "space",
}

DEFAULT_ADJECTIVE_CONCEPTS = {
    2: "dual",
    3: "triple",
    5: "vital",
    7: "true",
    11: "luminous",
    13: "harmonic",
    17: "wise",
    19: "living",
    23: "conscious",
}

UNKNOWN_CONCEPT_PREFIX = "prime-"
