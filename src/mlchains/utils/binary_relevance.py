from __future__ import annotations

# =====================
# Standard library
# =====================
import logging
from functools import partial
from typing import Any, Dict, Optional, Sequence

# =====================
# Third-party
# =====================
import numpy as np

# =====================
# Custom classes and functions
# =====================
from mlchains.settings.globals import DEFAULT_PROBABILITY
from mlchains.utils.base_learner import BaseLearner, LabelPrediction
from mlchains.utils.dataset_view import DatasetView, as_attribute_matrix
from mlchains.utils.errors import ValidationError
from mlchains.utils.executor import SeedLike, run_tasks
from mlchains.utils.models import BinaryModel
from mlchains.utils.prediction import PredictionResult, merge_label_predictions

logger = logging.getLogger(__name__)


def fit_label(learner: BaseLearner, X: np.ndarray, y: np.ndarray, rng: np.random.Generator):
    return learner.train(X, y, rng)


def predict_label(
    learner: BaseLearner,
    handle,
    X: np.ndarray,
    params: Optional[Dict[str, Any]],
    rng: np.random.Generator,
) -> LabelPrediction:
    return learner.predict(handle, X, rng, params=params)


def _select_labels(dataset: DatasetView, labels: Optional[Sequence[str]]):
    if labels is None:
        return dataset.label_names

    labels = list(labels)
    unknown = [label for label in labels if label not in dataset.label_names]
    if unknown:
        raise ValidationError(f"Unknown labels: {unknown}")
    if len(set(labels)) != len(labels):
        raise ValidationError("Labels must not be repeated")
    return [label for label in dataset.label_names if label in labels]


def train_binary_relevance(
    dataset: DatasetView,
    learner: BaseLearner,
    labels: Optional[Sequence[str]] = None,
    cores: int = 1,
    seed: SeedLike = None,
) -> BinaryModel:
    """Fit one independent binary model per label on the unmodified attributes."""
    labels = _select_labels(dataset, labels)
    X = dataset.attribute_matrix()
    Y = dataset.label_matrix(labels)

    logger.info("Training Binary Relevance: %d labels, %d instances", len(labels), len(dataset))
    tasks = [partial(fit_label, learner, X, Y[:, i]) for i in range(len(labels))]
    fitted = run_tasks(tasks, cores, seed)

    return BinaryModel(
        labels=labels,
        attributes=dataset.attribute_names,
        models=dict(zip(labels, fitted)),
        learner=learner,
    )


def predict_binary_relevance(
    model: BinaryModel,
    newdata,
    probability: bool = DEFAULT_PROBABILITY,
    cores: int = 1,
    seed: SeedLike = None,
    params: Optional[Dict[str, Any]] = None,
) -> PredictionResult:
    X = as_attribute_matrix(newdata, model.attributes)
    tasks = [
        partial(predict_label, model.learner, model.models[label], X, params)
        for label in model.labels
    ]
    predictions = run_tasks(tasks, cores, seed)
    return merge_label_predictions(dict(zip(model.labels, predictions)), model.labels, probability)
