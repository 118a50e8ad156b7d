"""Trained models. Built once by the training functions, read-only afterwards."""

from __future__ import annotations

# =====================
# Standard library
# =====================
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Union

# =====================
# Custom classes and functions
# =====================
from mlchains.settings.config import DecompositionKind
from mlchains.utils.base_learner import BaseLearner


class ModelKind(str, Enum):
    BINARY = "binary"
    CHAIN = "chain"
    ENSEMBLE = "ensemble"


@dataclass(frozen=True)
class BinaryModel:
    """Binary Relevance: one independent model per label."""

    labels: List[str]
    attributes: List[str]
    models: Dict[str, Any]
    learner: BaseLearner
    kind: ModelKind = field(default=ModelKind.BINARY, init=False)


@dataclass(frozen=True)
class ChainModel:
    """Classifier Chains: ``models[i]`` was trained on the attributes plus ``chain[:i]``."""

    labels: List[str]
    chain: List[str]
    attributes: List[str]
    models: List[Any]
    learner: BaseLearner
    kind: ModelKind = field(default=ModelKind.CHAIN, init=False)


@dataclass(frozen=True)
class EnsembleMember:
    model: Union[BinaryModel, ChainModel]
    attributes: List[str]
    nrow: int
    rows: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class EnsembleModel:
    """
    ``rounds`` members, each trained on ``nrow`` resampled instances and
    its own ``ncol`` attributes. ``cardinality`` is the label cardinality
    of the full training set, used to calibrate the voted prediction.
    """

    decomposition: DecompositionKind
    labels: List[str]
    attributes: List[str]
    rounds: int
    nrow: int
    ncol: int
    cardinality: float
    members: List[EnsembleMember]
    kind: ModelKind = field(default=ModelKind.ENSEMBLE, init=False)


Model = Union[BinaryModel, ChainModel, EnsembleModel]
