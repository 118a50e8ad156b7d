from __future__ import annotations

# =====================
# Standard library
# =====================
from typing import Optional, Sequence, Union

# =====================
# Third-party
# =====================
import numpy as np

# =====================
# Custom classes and functions
# =====================
from mlchains.settings.globals import DEFAULT_PROBABILITY, DEFAULT_THRESHOLD, VOTE_SCHEMAS
from mlchains.utils.errors import ValidationError
from mlchains.utils.prediction import MemberPredictions, PredictionResult


def check_vote_schema(schema: Optional[str]) -> None:
    if schema is not None and schema not in VOTE_SCHEMAS:
        raise ValidationError(
            f"Invalid vote schema '{schema}'. Valid options: {VOTE_SCHEMAS} or None"
        )


def aggregate_votes(
    results: Sequence[PredictionResult],
    schema: Optional[str],
    probability: bool = DEFAULT_PROBABILITY,
) -> Union[PredictionResult, MemberPredictions]:
    """
    Combine the predictions of ensemble members label by label.

    - avg / max / min : mean / extremum of the member scores
    - maj             : fraction of members predicting the label
    - None            : no combination, members are returned as they are

    The combined bipartition is ``score >= 0.5``.
    """
    check_vote_schema(schema)

    results = list(results)
    if not results:
        raise ValidationError("At least one member prediction is needed")

    if schema is None:
        return MemberPredictions(members=results)

    labels = results[0].labels
    aligned = [r if r.labels == labels else r.reorder(labels) for r in results]

    if schema == "maj":
        stacked = np.stack([r.bipartitions for r in aligned]).astype(float)
        scores = stacked.mean(axis=0)
    else:
        stacked = np.stack([r.scores for r in aligned])
        if schema == "avg":
            scores = stacked.mean(axis=0)
        elif schema == "max":
            scores = stacked.max(axis=0)
        else:
            scores = stacked.min(axis=0)

    return PredictionResult(
        scores=scores,
        bipartitions=(scores >= DEFAULT_THRESHOLD).astype(int),
        labels=list(labels),
        probability=probability,
    )
