from __future__ import annotations

# =====================
# Standard library
# =====================
import logging
import math
from functools import partial
from typing import Any, Dict, Optional, Union

# =====================
# Third-party
# =====================
import numpy as np
import pandas as pd

# =====================
# Custom classes and functions
# =====================
from mlchains.settings.config import DecompositionKind, EnsembleConfig
from mlchains.settings.globals import DEFAULT_PROBABILITY
from mlchains.utils.base_learner import BaseLearner
from mlchains.utils.binary_relevance import predict_binary_relevance, train_binary_relevance
from mlchains.utils.classifier_chain import predict_classifier_chain, train_classifier_chain
from mlchains.utils.dataset_view import DatasetView, as_attribute_matrix
from mlchains.utils.executor import SeedLike, draw_seed, run_tasks
from mlchains.utils.models import EnsembleMember, EnsembleModel, ModelKind
from mlchains.utils.prediction import MemberPredictions, PredictionResult
from mlchains.utils.threshold import lcard_threshold
from mlchains.utils.voting import aggregate_votes, check_vote_schema

logger = logging.getLogger(__name__)


# =====================
# Training
# =====================
def _train_member(
    dataset: DatasetView,
    config: EnsembleConfig,
    learner: BaseLearner,
    nrow: int,
    ncol: int,
    rng: np.random.Generator,
) -> EnsembleMember:
    measures = dataset.measures
    rows = rng.choice(measures.num_instances, size=nrow, replace=config.replacement)
    cols = np.sort(rng.choice(measures.num_attributes, size=ncol, replace=False))
    names = dataset.attribute_names
    attributes = [names[i] for i in cols]

    ndata = dataset.subset(rows, attributes)
    if config.kind == DecompositionKind.CHAIN:
        chain = [str(label) for label in rng.permutation(dataset.label_names)]
        model = train_classifier_chain(ndata, learner, chain, cores=1, seed=draw_seed(rng))
    else:
        model = train_binary_relevance(ndata, learner, cores=1, seed=draw_seed(rng))

    return EnsembleMember(
        model=model,
        attributes=attributes,
        nrow=nrow,
        rows=[int(row) for row in rows],
    )


def train_ensemble_model(
    dataset: DatasetView,
    config: EnsembleConfig,
    learner: BaseLearner,
    cores: int = 1,
    seed: SeedLike = None,
) -> EnsembleModel:
    """
    Train ``config.m`` decompositions, each on its own resample of
    instances and attributes (and, for chains, its own label order).
    Members are trained in parallel when ``cores > 1``.
    """
    measures = dataset.measures
    nrow = math.ceil(measures.num_instances * config.subsample)
    ncol = math.ceil(measures.num_attributes * config.attr_space)

    logger.info(
        "Training ensemble of %d %s models (%d instances, %d attributes each)",
        config.m,
        config.kind.value,
        nrow,
        ncol,
    )
    tasks = [partial(_train_member, dataset, config, learner, nrow, ncol) for _ in range(config.m)]
    members = run_tasks(tasks, cores, seed)
    logger.info("Ensemble of %d members done.", len(members))

    return EnsembleModel(
        decomposition=config.kind,
        labels=dataset.label_names,
        attributes=dataset.attribute_names,
        rounds=config.m,
        nrow=nrow,
        ncol=ncol,
        cardinality=measures.cardinality,
        members=members,
    )


# =====================
# Prediction
# =====================
def _predict_member(
    member: EnsembleMember,
    X: np.ndarray,
    probability: bool,
    params: Optional[Dict[str, Any]],
    rng: np.random.Generator,
) -> PredictionResult:
    if member.model.kind == ModelKind.CHAIN:
        return predict_classifier_chain(
            member.model, X, probability, seed=draw_seed(rng), params=params
        )
    return predict_binary_relevance(
        member.model, X, probability, cores=1, seed=draw_seed(rng), params=params
    )


def predict_ensemble_model(
    model: EnsembleModel,
    newdata,
    vote_schema: Optional[str],
    probability: bool = DEFAULT_PROBABILITY,
    cores: int = 1,
    seed: SeedLike = None,
    params: Optional[Dict[str, Any]] = None,
) -> Union[PredictionResult, MemberPredictions]:
    check_vote_schema(vote_schema)

    frame = pd.DataFrame(as_attribute_matrix(newdata, model.attributes), columns=model.attributes)
    tasks = [
        partial(
            _predict_member,
            member,
            as_attribute_matrix(frame, member.attributes),
            probability,
            params,
        )
        for member in model.members
    ]
    predictions = run_tasks(tasks, cores, seed)

    result = aggregate_votes(predictions, vote_schema, probability)
    if vote_schema is not None:
        result = lcard_threshold(result, model.cardinality, probability)
    return result
