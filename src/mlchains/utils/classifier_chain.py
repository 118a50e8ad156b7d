"""
Classifier Chains.

The attribute space of the i-th classifier is extended with the 0/1
relevance of the labels before it in the chain: the true values while
training, the predicted bipartitions while predicting.
"""

from __future__ import annotations

# =====================
# Standard library
# =====================
import logging
from collections import Counter
from functools import partial
from typing import Any, Dict, List, Optional, Sequence

# =====================
# Third-party
# =====================
import numpy as np

# =====================
# Custom classes and functions
# =====================
from mlchains.settings.globals import DEFAULT_PROBABILITY
from mlchains.utils.base_learner import BaseLearner
from mlchains.utils.binary_relevance import fit_label
from mlchains.utils.dataset_view import DatasetView, as_attribute_matrix
from mlchains.utils.errors import ValidationError
from mlchains.utils.executor import SeedLike, run_tasks
from mlchains.utils.models import ChainModel
from mlchains.utils.prediction import PredictionResult, merge_label_predictions

logger = logging.getLogger(__name__)


def check_chain(chain: Sequence[str], labels: Sequence[str]) -> List[str]:
    """The chain must hold every label exactly once and nothing else."""
    chain = [str(label) for label in chain]
    if Counter(chain) != Counter(labels):
        missing = sorted(set(labels) - set(chain))
        unknown = sorted(set(chain) - set(labels))
        repeated = sorted(label for label, count in Counter(chain).items() if count > 1)
        raise ValidationError(
            "Invalid chain (all labels must be on the chain exactly once): "
            f"missing={missing}, unknown={unknown}, repeated={repeated}"
        )
    return chain


def train_classifier_chain(
    dataset: DatasetView,
    learner: BaseLearner,
    chain: Optional[Sequence[str]] = None,
    cores: int = 1,
    seed: SeedLike = None,
) -> ChainModel:
    labels = dataset.label_names
    chain = labels if chain is None else check_chain(chain, labels)

    X = dataset.attribute_matrix()
    Y = dataset.label_matrix(chain)

    logger.info("Training Classifier Chain: %s", " -> ".join(chain))
    # Only the true label values feed the augmentation, so every link can be fitted independently
    tasks = [
        partial(fit_label, learner, np.hstack([X, Y[:, :i]]), Y[:, i])
        for i in range(len(chain))
    ]
    fitted = run_tasks(tasks, cores, seed)

    return ChainModel(
        labels=labels,
        chain=list(chain),
        attributes=dataset.attribute_names,
        models=fitted,
        learner=learner,
    )


def _predict_along_chain(
    model: ChainModel,
    X: np.ndarray,
    params: Optional[Dict[str, Any]],
    rng: np.random.Generator,
):
    features = [X]
    predictions = {}
    for label, handle in zip(model.chain, model.models):
        prediction = model.learner.predict(handle, np.hstack(features), rng, params=params)
        predictions[label] = prediction
        features.append(np.asarray(prediction.bipartition, dtype=float).reshape(-1, 1))
    return predictions


def predict_classifier_chain(
    model: ChainModel,
    newdata,
    probability: bool = DEFAULT_PROBABILITY,
    seed: SeedLike = None,
    params: Optional[Dict[str, Any]] = None,
) -> PredictionResult:
    """Predict label by label in chain order; the chain cannot be parallelized."""
    X = as_attribute_matrix(newdata, model.attributes)
    (predictions,) = run_tasks([partial(_predict_along_chain, model, X, params)], cores=1, seed=seed)
    return merge_label_predictions(predictions, model.labels, probability)
