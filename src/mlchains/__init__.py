"""Multi-label classification through problem transformation and ensembles."""

from mlchains.api import predict, train_binary, train_chain, train_ensemble
from mlchains.settings.config import DecompositionKind
from mlchains.utils.chain_ensemble_pipeline import ChainEnsemblePipeline
from mlchains.utils.dataset_view import DatasetView
from mlchains.utils.errors import MLChainsError, SchemaMismatch, TrainingFailure, ValidationError
from mlchains.utils.models import BinaryModel, ChainModel, EnsembleModel, ModelKind
from mlchains.utils.prediction import MemberPredictions, PredictionResult
from mlchains.utils.threshold import fixed_threshold, lcard_threshold, rcut_threshold
from mlchains.utils.voting import aggregate_votes

__all__ = [
    "BinaryModel",
    "ChainEnsemblePipeline",
    "ChainModel",
    "DatasetView",
    "DecompositionKind",
    "EnsembleModel",
    "MLChainsError",
    "MemberPredictions",
    "ModelKind",
    "PredictionResult",
    "SchemaMismatch",
    "TrainingFailure",
    "ValidationError",
    "aggregate_votes",
    "fixed_threshold",
    "lcard_threshold",
    "predict",
    "rcut_threshold",
    "train_binary",
    "train_chain",
    "train_ensemble",
]
