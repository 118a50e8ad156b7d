from __future__ import annotations

# =====================
# Standard library
# =====================
from dataclasses import dataclass, field, replace
from typing import Dict, List, Sequence

# =====================
# Third-party
# =====================
import numpy as np
import pandas as pd

# =====================
# Custom classes and functions
# =====================
from mlchains.settings.globals import DEFAULT_PROBABILITY
from mlchains.utils.base_learner import LabelPrediction
from mlchains.utils.errors import ValidationError


@dataclass(frozen=True, eq=False)
class PredictionResult:
    """
    Multi-label prediction:
    - scores (instances x labels, in [0, 1])
    - bipartitions (instances x labels, 0/1)

    ``probability`` decides which of the two ``as_matrix`` returns.
    """

    scores: np.ndarray
    bipartitions: np.ndarray
    labels: List[str]
    probability: bool = DEFAULT_PROBABILITY

    def __post_init__(self):
        # private copies, so freezing them leaves the caller's arrays writable
        object.__setattr__(self, "scores", np.array(self.scores, copy=True))
        object.__setattr__(self, "bipartitions", np.array(self.bipartitions, copy=True))
        if self.scores.shape != self.bipartitions.shape:
            raise ValidationError("Scores and bipartitions must have the same shape")
        if self.scores.ndim != 2 or self.scores.shape[1] != len(self.labels):
            raise ValidationError("Prediction columns must match the label names")
        self.scores.setflags(write=False)
        self.bipartitions.setflags(write=False)

    @property
    def n_instances(self) -> int:
        return self.scores.shape[0]

    def as_matrix(self) -> np.ndarray:
        return self.scores if self.probability else self.bipartitions

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.as_matrix(), columns=self.labels)

    def with_bipartitions(self, bipartitions: np.ndarray, probability: bool | None = None) -> PredictionResult:
        return replace(
            self,
            scores=self.scores.copy(),
            bipartitions=np.asarray(bipartitions, dtype=int),
            probability=self.probability if probability is None else probability,
        )

    def reorder(self, labels: Sequence[str]) -> PredictionResult:
        """Same prediction with its columns in ``labels`` order."""
        if sorted(labels) != sorted(self.labels):
            raise ValidationError("Cannot reorder a prediction onto a different label set")
        idx = [self.labels.index(label) for label in labels]
        return replace(
            self,
            scores=self.scores[:, idx].copy(),
            bipartitions=self.bipartitions[:, idx].copy(),
            labels=list(labels),
        )


@dataclass(frozen=True)
class MemberPredictions:
    """Unmerged predictions of every ensemble member, in member order."""

    members: List[PredictionResult] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.members)

    def __getitem__(self, idx: int) -> PredictionResult:
        return self.members[idx]

    def __iter__(self):
        return iter(self.members)


def merge_label_predictions(
    predictions: Dict[str, LabelPrediction],
    labels: Sequence[str],
    probability: bool = DEFAULT_PROBABILITY,
) -> PredictionResult:
    """Stack per-label predictions into one result whose columns follow ``labels``."""
    missing = [label for label in labels if label not in predictions]
    if missing:
        raise ValidationError(f"No prediction for labels: {missing}")

    scores = np.column_stack([np.asarray(predictions[label].score, dtype=float) for label in labels])
    bipartitions = np.column_stack(
        [np.asarray(predictions[label].bipartition, dtype=int) for label in labels]
    )
    return PredictionResult(
        scores=scores,
        bipartitions=bipartitions,
        labels=list(labels),
        probability=probability,
    )
