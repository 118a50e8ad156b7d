# =====================
# Standard library
# =====================
from typing import Any, Dict, Optional

# =====================
# Third-party
# =====================
import numpy as np

# =====================
# Custom classes and functions
# =====================
from mlchains.api import predict
from mlchains.settings.globals import DEFAULT_CORES, DEFAULT_VOTE_SCHEMA
from mlchains.utils.errors import ValidationError
from mlchains.utils.models import Model
from mlchains.utils.voting import check_vote_schema

# =====================
# Pipeline wrapper
# =====================

class ChainEnsemblePipeline:
    """
    Wrapper behaving like a fitted sklearn classifier:
    trained model + fixed prediction settings
    """

    def __init__(
        self,
        model: Model,
        vote_schema: Optional[str] = DEFAULT_VOTE_SCHEMA,
        cores: int = DEFAULT_CORES,
        seed: Optional[int] = None,
        predict_params: Optional[Dict[str, Any]] = None,
    ):
        check_vote_schema(vote_schema)
        if vote_schema is None:
            raise ValidationError("The pipeline needs a vote schema to merge ensemble members")

        self.model = model
        self.vote_schema = vote_schema
        self.cores = cores
        self.seed = seed
        self.predict_params = dict(predict_params or {})

    @property
    def classes_(self):
        return list(self.model.labels)

    def _predict(self, X, probability: bool):
        return predict(
            self.model,
            X,
            vote_schema=self.vote_schema,
            probability=probability,
            cores=self.cores,
            seed=self.seed,
            predict_params=self.predict_params,
        )

    def predict_proba(self, X) -> np.ndarray:
        return np.asarray(self._predict(X, probability=True).scores)

    def predict(self, X) -> np.ndarray:
        return np.asarray(self._predict(X, probability=False).bipartitions)
