from __future__ import annotations

from pathlib import Path

import pytest

from aleph.config import SemanticsConfig

ENV_KEYS = [
    "ALEPH_OPERATOR",
    "ALEPH_MAX_REDUCTION_STEPS",
    "ALEPH_MAX_LAMBDA_STEPS",
    "ALEPH_FUSION_WORKERS",
    "ALEPH_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so monkeypatch restores the original state, including
    # variables that load_dotenv sets during the test.
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


def test_defaults():
    config = SemanticsConfig()
    assert config.operator == "resonance"
    assert config.max_reduction_steps == 10_000
    assert config.max_lambda_steps == 100_000
    assert config.fusion_workers is None
    assert config.log_level == "WARNING"


def test_normalizes_names():
    config = SemanticsConfig(operator="Next-Prime", log_level="debug", fusion_workers=0)
    assert config.operator == "next_prime"
    assert config.log_level == "DEBUG"
    assert config.fusion_workers is None
    assert SemanticsConfig(log_level="chatty").log_level == "WARNING"


def test_rejects_unknown_operator_and_bad_limits():
    with pytest.raises(ValueError):
        SemanticsConfig(operator="bogus")
    with pytest.raises(ValueError):
        SemanticsConfig(max_reduction_steps=0)
    with pytest.raises(ValueError):
        SemanticsConfig(max_lambda_steps=-1)


def test_from_env(clean_env):
    clean_env.setenv("ALEPH_OPERATOR", "next_prime")
    clean_env.setenv("ALEPH_MAX_REDUCTION_STEPS", "50")
    clean_env.setenv("ALEPH_FUSION_WORKERS", "4")
    config = SemanticsConfig.from_env()
    assert config.operator == "next_prime"
    assert config.max_reduction_steps == 50
    assert config.fusion_workers == 4
    assert config.max_lambda_steps == 100_000


def test_from_env_file(clean_env, tmp_path: Path):
    env_file = tmp_path / ".env"
    env_file.write_text("ALEPH_OPERATOR=next_prime\nALEPH_MAX_LAMBDA_STEPS=500\n", encoding="utf-8")
    clean_env.setenv("ALEPH_MAX_LAMBDA_STEPS", "700")
    config = SemanticsConfig.from_env(env_file)
    assert config.operator == "next_prime"
    # process environment wins over the file
    assert config.max_lambda_steps == 700
