"""Explicit configuration values passed down every training / prediction call.

Nothing here is process-wide state: each public function builds the
models below from its own arguments, so two calls never influence
each other.
"""

from __future__ import annotations

# =====================
# Standard library
# =====================
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar

# =====================
# Third-party
# =====================
import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

# =====================
# Custom classes and functions
# =====================
from mlchains.settings.globals import (
    DEFAULT_ATTR_SPACE,
    DEFAULT_BASE_ALGORITHM,
    DEFAULT_CORES,
    DEFAULT_N_MODELS,
    DEFAULT_REPLACEMENT,
    DEFAULT_SUBSAMPLE,
    MIN_ATTR_SPACE,
    MIN_SUBSAMPLE,
)
from mlchains.utils.errors import ValidationError

T = TypeVar("T", bound=BaseModel)


class DecompositionKind(str, Enum):
    """Problem transformation used by each ensemble member."""

    BINARY = "binary"
    CHAIN = "chain"


class ExecutionConfig(BaseModel):
    """Worker count and base seed for the task executor."""

    model_config = ConfigDict(frozen=True)

    cores: int = Field(default=DEFAULT_CORES)
    seed: Optional[int] = None

    @field_validator("cores")
    @classmethod
    def _check_cores(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Cores must be a positive value")
        return value


class LearnerConfig(BaseModel):
    """Name of the base algorithm plus the parameters forwarded to it."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    algorithm: Any = DEFAULT_BASE_ALGORITHM
    params: Dict[str, Any] = Field(default_factory=dict)


class EnsembleConfig(BaseModel):
    """Resampling parameters of an ensemble."""

    model_config = ConfigDict(frozen=True)

    m: int = DEFAULT_N_MODELS
    subsample: float = Field(default=DEFAULT_SUBSAMPLE, allow_inf_nan=False)
    attr_space: float = Field(default=DEFAULT_ATTR_SPACE, allow_inf_nan=False)
    replacement: bool = DEFAULT_REPLACEMENT
    kind: DecompositionKind = DecompositionKind.CHAIN

    @field_validator("m")
    @classmethod
    def _check_m(cls, value: int) -> int:
        if value <= 1:
            raise ValueError("The number of iterations (m) must be greater than 1")
        return value

    @field_validator("subsample")
    @classmethod
    def _check_subsample(cls, value: float) -> float:
        if value < MIN_SUBSAMPLE or value > 1:
            raise ValueError(
                f"The subset of training instances must be between {MIN_SUBSAMPLE} and 1 inclusive"
            )
        return value

    @field_validator("attr_space")
    @classmethod
    def _check_attr_space(cls, value: float) -> float:
        if value <= MIN_ATTR_SPACE or value > 1:
            raise ValueError(
                f"The attribute space must be greater than {MIN_ATTR_SPACE} and at most 1"
            )
        return value


def build_config(config_cls: Type[T], **values: Any) -> T:
    """Instantiate ``config_cls``, reporting bad values as :class:`ValidationError`."""
    try:
        return config_cls(**values)
    except pydantic.ValidationError as exc:
        messages = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise ValidationError(messages) from exc
