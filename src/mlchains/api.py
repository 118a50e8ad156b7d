"""
Public entry points.

Training: ``train_binary``, ``train_chain``, ``train_ensemble``.
Prediction: ``predict`` for any model they return.
"""

from __future__ import annotations

# =====================
# Standard library
# =====================
from typing import Any, Dict, Optional, Sequence, Union

# =====================
# Custom classes and functions
# =====================
from mlchains.settings.config import (
    DecompositionKind,
    EnsembleConfig,
    ExecutionConfig,
    LearnerConfig,
    build_config,
)
from mlchains.settings.globals import (
    DEFAULT_ATTR_SPACE,
    DEFAULT_BASE_ALGORITHM,
    DEFAULT_CORES,
    DEFAULT_N_MODELS,
    DEFAULT_PROBABILITY,
    DEFAULT_REPLACEMENT,
    DEFAULT_SUBSAMPLE,
    DEFAULT_VOTE_SCHEMA,
)
from mlchains.utils.base_learner import get_base_learner
from mlchains.utils.binary_relevance import predict_binary_relevance, train_binary_relevance
from mlchains.utils.classifier_chain import predict_classifier_chain, train_classifier_chain
from mlchains.utils.dataset_view import DatasetView
from mlchains.utils.ensemble import predict_ensemble_model, train_ensemble_model
from mlchains.utils.errors import ValidationError
from mlchains.utils.models import BinaryModel, ChainModel, EnsembleModel, Model, ModelKind
from mlchains.utils.prediction import MemberPredictions, PredictionResult
from mlchains.utils.voting import check_vote_schema


def _check_dataset(dataset) -> DatasetView:
    if not isinstance(dataset, DatasetView):
        raise ValidationError("First argument must be a DatasetView")
    return dataset


def _resolve_learner(base_algorithm, base_params: Optional[Dict[str, Any]]):
    config = build_config(LearnerConfig, algorithm=base_algorithm, params=base_params or {})
    return get_base_learner(config.algorithm, config.params)


# =====================
# Training
# =====================
def train_binary(
    dataset: DatasetView,
    base_algorithm=DEFAULT_BASE_ALGORITHM,
    base_params: Optional[Dict[str, Any]] = None,
    labels: Optional[Sequence[str]] = None,
    cores: int = DEFAULT_CORES,
    seed: Optional[int] = None,
) -> BinaryModel:
    """Binary Relevance: one independent classifier per label."""
    dataset = _check_dataset(dataset)
    execution = build_config(ExecutionConfig, cores=cores, seed=seed)
    learner = _resolve_learner(base_algorithm, base_params)
    return train_binary_relevance(dataset, learner, labels, execution.cores, execution.seed)


def train_chain(
    dataset: DatasetView,
    chain: Optional[Sequence[str]] = None,
    base_algorithm=DEFAULT_BASE_ALGORITHM,
    base_params: Optional[Dict[str, Any]] = None,
    cores: int = DEFAULT_CORES,
    seed: Optional[int] = None,
) -> ChainModel:
    """Classifier Chains following ``chain`` (the dataset label order when omitted)."""
    dataset = _check_dataset(dataset)
    execution = build_config(ExecutionConfig, cores=cores, seed=seed)
    learner = _resolve_learner(base_algorithm, base_params)
    return train_classifier_chain(dataset, learner, chain, execution.cores, execution.seed)


def train_ensemble(
    dataset: DatasetView,
    m: int = DEFAULT_N_MODELS,
    subsample: float = DEFAULT_SUBSAMPLE,
    attr_space: float = DEFAULT_ATTR_SPACE,
    replacement: bool = DEFAULT_REPLACEMENT,
    kind: Union[str, DecompositionKind] = DecompositionKind.CHAIN,
    base_algorithm=DEFAULT_BASE_ALGORITHM,
    base_params: Optional[Dict[str, Any]] = None,
    cores: int = DEFAULT_CORES,
    seed: Optional[int] = None,
) -> EnsembleModel:
    """
    Ensemble of Classifier Chains (``kind="chain"``) or of Binary
    Relevance models (``kind="binary"``).

    Args:
        m: number of members, greater than 1
        subsample: fraction of instances drawn per member, in [0.1, 1]
        attr_space: fraction of attributes drawn per member, in (0.1, 1]
        replacement: draw instances with replacement
    """
    dataset = _check_dataset(dataset)
    ensemble = build_config(
        EnsembleConfig,
        m=m,
        subsample=subsample,
        attr_space=attr_space,
        replacement=replacement,
        kind=kind,
    )
    execution = build_config(ExecutionConfig, cores=cores, seed=seed)
    learner = _resolve_learner(base_algorithm, base_params)
    return train_ensemble_model(dataset, ensemble, learner, execution.cores, execution.seed)


# =====================
# Prediction
# =====================
def predict(
    model: Model,
    newdata,
    vote_schema: Optional[str] = DEFAULT_VOTE_SCHEMA,
    probability: bool = DEFAULT_PROBABILITY,
    cores: int = DEFAULT_CORES,
    seed: Optional[int] = None,
    predict_params: Optional[Dict[str, Any]] = None,
) -> Union[PredictionResult, MemberPredictions]:
    """
    Predict ``newdata`` with a model returned by one of the training functions.

    ``vote_schema`` ("avg", "maj", "max", "min" or None) only applies to
    ensembles; chains always predict sequentially and ignore ``cores``.
    ``predict_params`` go to every base learner prediction call.
    """
    execution = build_config(ExecutionConfig, cores=cores, seed=seed)
    check_vote_schema(vote_schema)

    kind = getattr(model, "kind", None)
    if kind == ModelKind.BINARY:
        return predict_binary_relevance(
            model, newdata, probability, execution.cores, execution.seed, predict_params
        )
    if kind == ModelKind.CHAIN:
        return predict_classifier_chain(model, newdata, probability, execution.seed, predict_params)
    if kind == ModelKind.ENSEMBLE:
        return predict_ensemble_model(
            model, newdata, vote_schema, probability, execution.cores, execution.seed, predict_params
        )
    raise TypeError(f"Unsupported model type: {type(model).__name__}")
