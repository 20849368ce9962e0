"""
Runtime configuration for the aleph semantics core.

This module defines the SemanticsConfig dataclass that captures the tunable
parameters of the engine: which prime operator the reduction system,
translator and denotation share, and the step ceilings callers impose on
normalization and lambda evaluation.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from aleph.constants import (
    DEFAULT_MAX_LAMBDA_STEPS,
    DEFAULT_MAX_REDUCTION_STEPS,
    DEFAULT_OPERATOR,
    OPERATOR_NEXT_PRIME,
    OPERATOR_RESONANCE,
)

ENV_PREFIX = "ALEPH_"

KNOWN_OPERATORS = {OPERATOR_RESONANCE, OPERATOR_NEXT_PRIME}


@dataclass
class SemanticsConfig:
    """
    Configuration for the aleph semantics core.

    Attributes:
        operator: Registry name of the prime operator used by adjectives.
        max_reduction_steps: Ceiling on ReductionSystem.normalize steps.
        max_lambda_steps: Ceiling on LambdaEvaluator reduction steps.
        fusion_workers: Thread count for triad enumeration (None = serial).
        log_level: Logging level name used by the CLI runner.
    """

    operator: str = DEFAULT_OPERATOR
    max_reduction_steps: int = DEFAULT_MAX_REDUCTION_STEPS
    max_lambda_steps: int = DEFAULT_MAX_LAMBDA_STEPS
    fusion_workers: Optional[int] = None
    log_level: str = "WARNING"

    def __post_init__(self):
        """Normalize names and reject unusable limits."""
        self.operator = str(self.operator).strip().lower().replace("-", "_")
        if self.operator not in KNOWN_OPERATORS:
            raise ValueError(
                f"Unknown operator {self.operator!r}; expected one of {sorted(KNOWN_OPERATORS)}"
            )

        self.max_reduction_steps = int(self.max_reduction_steps)
        self.max_lambda_steps = int(self.max_lambda_steps)
        if self.max_reduction_steps < 1:
            raise ValueError("max_reduction_steps must be positive")
        if self.max_lambda_steps < 1:
            raise ValueError("max_lambda_steps must be positive")

        if self.fusion_workers is not None:
            self.fusion_workers = int(self.fusion_workers)
            if self.fusion_workers < 1:
                self.fusion_workers = None

        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            self.log_level = "WARNING"

    @classmethod
    def for_next_prime(cls) -> "SemanticsConfig":
        """
        Create configuration that uses the next-prime operator.

        Returns:
            SemanticsConfig with operator set to "next_prime".
        """
        return cls(operator=OPERATOR_NEXT_PRIME)

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> "SemanticsConfig":
        """
        Build configuration from ALEPH_* environment variables.

        A .env file is loaded first (python-dotenv); variables already set in
        the process environment take precedence over the file.

        Args:
            env_file: Optional explicit path to a .env file.

        Returns:
            SemanticsConfig populated from the environment, defaults elsewhere.
        """
        if env_file is not None:
            load_dotenv(dotenv_path=Path(env_file), override=False)
        else:
            load_dotenv(override=False)

        kwargs = {}
        operator = os.getenv(f"{ENV_PREFIX}OPERATOR")
        if operator:
            kwargs["operator"] = operator
        max_steps = os.getenv(f"{ENV_PREFIX}MAX_REDUCTION_STEPS")
        if max_steps:
            kwargs["max_reduction_steps"] = int(max_steps)
        max_lambda = os.getenv(f"{ENV_PREFIX}MAX_LAMBDA_STEPS")
        if max_lambda:
            kwargs["max_lambda_steps"] = int(max_lambda)
        workers = os.getenv(f"{ENV_PREFIX}FUSION_WORKERS")
        if workers:
            kwargs["fusion_workers"] = int(workers)
        log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if log_level:
            kwargs["log_level"] = log_level
        return cls(**kwargs)
