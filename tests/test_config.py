"""Tests for the explicit configuration values."""

from __future__ import annotations

import pytest

from mlchains import ValidationError
from mlchains.settings.config import (
    DecompositionKind,
    EnsembleConfig,
    ExecutionConfig,
    build_config,
)
from mlchains.settings.globals import DEFAULT_ATTR_SPACE, DEFAULT_N_MODELS, DEFAULT_SUBSAMPLE


def test_ensemble_defaults() -> None:
    config = build_config(EnsembleConfig)

    assert config.m == DEFAULT_N_MODELS
    assert config.subsample == DEFAULT_SUBSAMPLE
    assert config.attr_space == DEFAULT_ATTR_SPACE
    assert config.replacement is True
    assert config.kind == DecompositionKind.CHAIN


def test_kind_accepts_strings() -> None:
    assert build_config(EnsembleConfig, kind="binary").kind == DecompositionKind.BINARY


def test_errors_use_library_exception() -> None:
    with pytest.raises(ValidationError, match="m"):
        build_config(EnsembleConfig, m=1)


def test_configs_are_frozen() -> None:
    config = build_config(ExecutionConfig, cores=2, seed=3)

    with pytest.raises(Exception):
        config.cores = 4


def test_validation_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        build_config(ExecutionConfig, cores=0)
