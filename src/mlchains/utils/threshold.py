"""Threshold rules turning scores into bipartitions. Scores are never modified."""

from __future__ import annotations

# =====================
# Standard library
# =====================
import logging
import math

# =====================
# Third-party
# =====================
import numpy as np

# =====================
# Custom classes and functions
# =====================
from mlchains.settings.globals import DEFAULT_THRESHOLD
from mlchains.utils.errors import ValidationError
from mlchains.utils.prediction import PredictionResult

logger = logging.getLogger(__name__)


def fixed_threshold(
    result: PredictionResult,
    threshold: float = DEFAULT_THRESHOLD,
    probability: bool | None = None,
) -> PredictionResult:
    """Label is positive when its score is at least ``threshold``."""
    bipartitions = (result.scores >= threshold).astype(int)
    return result.with_bipartitions(bipartitions, probability)


def rcut_threshold(result: PredictionResult, k: int, probability: bool | None = None) -> PredictionResult:
    """
    Rank cut: the ``k`` best scored labels of every instance are positive.

    Ties keep the label order of the result (stable sort).
    """
    if k < 0:
        raise ValidationError("k must be a non negative value")

    n_instances, n_labels = result.scores.shape
    k = min(int(k), n_labels)

    ranking = np.argsort(-result.scores, axis=1, kind="stable")
    bipartitions = np.zeros((n_instances, n_labels), dtype=int)
    rows = np.arange(n_instances)[:, None]
    bipartitions[rows, ranking[:, :k]] = 1
    return result.with_bipartitions(bipartitions, probability)


def lcard_threshold(
    result: PredictionResult,
    cardinality: float,
    probability: bool | None = None,
) -> PredictionResult:
    """
    Keep the ``round(cardinality)`` best scored labels of each instance,
    so predicted label sets have the size observed in training.
    """
    if cardinality is None or math.isnan(cardinality) or cardinality < 0:
        raise ValidationError("The cardinality must be a non negative number")

    k = round(cardinality)
    logger.debug("Cardinality %.3f -> keeping %d labels per instance", cardinality, k)
    return rcut_threshold(result, k, probability)
