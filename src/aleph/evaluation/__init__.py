"""
Evaluation module for aleph.

Provides:
- Normal form verification (NF_ok) with certificates
- Strong normalization and local confluence checks
- Deterministic audit gates
"""

from .verifier import VerificationCertificate, NormalFormVerifier
from .proofs import (
    ReductionGraphTooLarge,
    StrongNormalizationProof,
    ConfluenceCase,
    ConfluenceReport,
    CONFLUENCE_BATTERY,
    build_reduction_graph,
    demonstrate_strong_normalization,
    check_confluence,
    test_local_confluence,
)
from .audits import (
    AuditResult,
    run_all_audits,
    audits_to_dataframe,
)

__all__ = [
    # Verification
    "VerificationCertificate",
    "NormalFormVerifier",
    # Proofs
    "ReductionGraphTooLarge",
    "StrongNormalizationProof",
    "ConfluenceCase",
    "ConfluenceReport",
    "CONFLUENCE_BATTERY",
    "build_reduction_graph",
    "demonstrate_strong_normalization",
    "check_confluence",
    "test_local_confluence",
    # Audits
    "AuditResult",
    "run_all_audits",
    "audits_to_dataframe",
]
