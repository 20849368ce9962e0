#!/usr/bin/env python3
"""
Command-line runner for the aleph semantics core.

Usage:
    python -m aleph.run_semantics evaluate "A(2)A(3)N(7)" [--trace]
    python -m aleph.run_semantics translate "[FUSE(3,5,11)] ∘ [N(7)]"
    python -m aleph.run_semantics canonical 23 [--upto 100]
    python -m aleph.run_semantics audit [--csv audits.csv]

The global options --operator, --log-level and --env-file go before the
subcommand and override the ALEPH_* environment (and .env) configuration.
"""

import argparse
import logging
import sys
from typing import List, Optional

from tqdm import tqdm

from aleph.config import SemanticsConfig
from aleph.core.parser import TermParseError, parse_term
from aleph.core.primes import primes_up_to
from aleph.core.terms import MalformedTermError
from aleph.evaluation.audits import audits_to_dataframe, run_all_audits
from aleph.evaluation.proofs import demonstrate_strong_normalization
from aleph.lambda_calculus.evaluator import LambdaEvaluator
from aleph.lambda_calculus.translator import Translator
from aleph.reduction.canonical import FusionCanonicalizer
from aleph.reduction.system import ReductionSystem
from aleph.semantics.concepts import ConceptInterpreter
from aleph.semantics.denotation import Semantics

logger = logging.getLogger(__name__)


def _banner(title: str) -> None:
    print("=" * 70)
    print(title)
    print("=" * 70)


# =============================================================================
# SUBCOMMANDS
# =============================================================================

def cmd_evaluate(args: argparse.Namespace, config: SemanticsConfig) -> int:
    term = parse_term(args.term)
    reducer = ReductionSystem(config=config)
    trace = reducer.normalize(term)

    _banner(f"Evaluate: {term}")
    if args.trace:
        df = trace.to_dataframe()
        if df.empty:
            print("(no reduction steps)")
        else:
            print(df.to_string(index=False))
        print()

    result = reducer.evaluate(term)
    value = Semantics(reducer.operator, config).denote(term)
    proof = demonstrate_strong_normalization(term, reducer)
    print(f"Normal form:   {trace.final}")
    print(f"Outcome:       {result.outcome.value if result.outcome else 'truncated'}")
    print(f"Steps:         {result.steps}")
    print(f"Value:         {result.prime}")
    print(f"Denotation:    {value}")
    print(f"Sizes:         {proof.sizes}")
    print(f"Concept:       {ConceptInterpreter().interpret(trace.final)}")
    return 0


def cmd_translate(args: argparse.Namespace, config: SemanticsConfig) -> int:
    term = parse_term(args.term)
    translator = Translator(config=config)
    expr = translator.translate(term)
    result = LambdaEvaluator(translator.operator, config).evaluate(expr)

    _banner(f"Translate: {term}")
    print(f"τ(e):          {expr}")
    print(f"Normal form:   {result.normal_form}")
    print(f"Steps:         {result.steps}")
    print(f"Value:         {result.value}")
    if result.stuck:
        print("Stuck:         inapplicable primitive")
    return 0


def cmd_canonical(args: argparse.Namespace, config: SemanticsConfig) -> int:
    canonicalizer = FusionCanonicalizer(config=config)
    if args.upto is None:
        targets = [args.prime]
    else:
        targets = [p for p in primes_up_to(args.upto) if p >= args.prime]

    _banner("Fusion canonicalization")
    for P in tqdm(targets, desc="Canonical triads", disable=len(targets) < 2):
        ranked = canonicalizer.rank(P)
        if not ranked:
            print(f"P={P}: no triad")
            continue
        best, score = ranked[0]
        print(f"P={P}: {best} score={score} ({float(score):.4f}), {len(ranked)} triads")
    return 0


def cmd_audit(args: argparse.Namespace, config: SemanticsConfig) -> int:
    results = run_all_audits(config)
    df = audits_to_dataframe(results)

    _banner(f"Audits ({config.operator})")
    print(df[["gate_id", "passed", "succeeded", "total", "details"]].to_string(index=False))
    if args.csv:
        df.to_csv(args.csv, index=False)
        print(f"\nAudit report saved to {args.csv}")
    return 0 if all(r.passed for r in results) else 1


# =============================================================================
# CLI
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Evaluate, translate and audit prime-indexed terms"
    )
    parser.add_argument(
        "--operator",
        default=None,
        help="Prime operator (resonance or next_prime); overrides ALEPH_OPERATOR",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level; overrides ALEPH_LOG_LEVEL",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Explicit .env file to load",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_eval = sub.add_parser("evaluate", help="Normalize a term and report its value")
    p_eval.add_argument("term", help="Term in surface syntax, e.g. 'A(2)A(3)N(7)'")
    p_eval.add_argument("--trace", action="store_true", help="Print every reduction step")
    p_eval.set_defaults(func=cmd_evaluate)

    p_tr = sub.add_parser("translate", help="Translate a term to λ and evaluate it")
    p_tr.add_argument("term", help="Term in surface syntax")
    p_tr.set_defaults(func=cmd_translate)

    p_can = sub.add_parser("canonical", help="Canonical fusion triad for a prime")
    p_can.add_argument("prime", type=int, help="Target prime (lower bound with --upto)")
    p_can.add_argument("--upto", type=int, default=None, help="Sweep every prime up to N")
    p_can.set_defaults(func=cmd_canonical)

    p_audit = sub.add_parser("audit", help="Run every audit gate")
    p_audit.add_argument("--csv", default=None, help="Write the audit table to CSV")
    p_audit.set_defaults(func=cmd_audit)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = SemanticsConfig.from_env(args.env_file)
        if args.operator:
            config = SemanticsConfig(
                operator=args.operator,
                max_reduction_steps=config.max_reduction_steps,
                max_lambda_steps=config.max_lambda_steps,
                fusion_workers=config.fusion_workers,
                log_level=config.log_level,
            )
    except ValueError as exc:
        parser.error(str(exc))
    level = (args.log_level or config.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        return args.func(args, config)
    except (TermParseError, MalformedTermError) as exc:
        logger.error(f"Invalid term: {exc}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
