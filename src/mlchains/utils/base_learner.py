"""
Boundary with the base supervised algorithm.

A base learner turns (features, binary target) into an opaque handle,
and a handle plus features into a ``LabelPrediction``. Any
scikit-learn compatible classifier can be plugged in through
``SklearnLearner``; the registry below names the usual ones.
"""

from __future__ import annotations

# =====================
# Standard library
# =====================
import warnings
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol

# =====================
# Third-party
# =====================
import numpy as np
from lightgbm import LGBMClassifier
from sklearn.base import clone
from sklearn.ensemble import RandomForestClassifier
from sklearn.linear_model import LogisticRegression
from sklearn.svm import SVC
from sklearn.tree import DecisionTreeClassifier

# =====================
# Custom classes and functions
# =====================
from mlchains.settings.globals import DEFAULT_THRESHOLD
from mlchains.utils.errors import ValidationError
from mlchains.utils.executor import draw_seed

warnings.filterwarnings("ignore", category=UserWarning, module="lightgbm")


@dataclass(frozen=True)
class LabelPrediction:
    """Scores in [0, 1] and 0/1 decisions of one label for every instance."""

    score: np.ndarray
    bipartition: np.ndarray

    @classmethod
    def from_scores(cls, score, threshold: float = DEFAULT_THRESHOLD) -> LabelPrediction:
        score = np.asarray(score, dtype=float)
        return cls(score=score, bipartition=(score >= threshold).astype(int))


class BaseLearner(Protocol):
    def train(self, X: np.ndarray, y: np.ndarray, rng: np.random.Generator) -> Any:
        ...

    def predict(
        self,
        handle: Any,
        X: np.ndarray,
        rng: np.random.Generator,
        params: Optional[Dict[str, Any]] = None,
    ) -> LabelPrediction:
        ...


@dataclass(frozen=True)
class ConstantModel:
    """Handle for a target that holds a single value in the training data."""

    value: int


class SklearnLearner:
    """Wraps a scikit-learn classifier; a fresh clone is fitted per sub-problem."""

    def __init__(
        self,
        estimator,
        params: Optional[Dict[str, Any]] = None,
        threshold: float = DEFAULT_THRESHOLD,
    ):
        self.estimator = estimator
        self.params = dict(params or {})
        self.threshold = threshold

    def train(self, X: np.ndarray, y: np.ndarray, rng: np.random.Generator) -> Any:
        y = np.asarray(y).astype(int)
        classes = np.unique(y)
        if len(classes) == 1:
            return ConstantModel(int(classes[0]))

        estimator = clone(self.estimator)
        if self.params:
            estimator.set_params(**self.params)
        if "random_state" in estimator.get_params() and "random_state" not in self.params:
            estimator.set_params(random_state=draw_seed(rng))

        estimator.fit(X, y)
        return estimator

    def predict(
        self,
        handle: Any,
        X: np.ndarray,
        rng: np.random.Generator,
        params: Optional[Dict[str, Any]] = None,
    ) -> LabelPrediction:
        """``params`` are passed to ``predict_proba`` as keyword arguments."""
        if isinstance(handle, ConstantModel):
            return LabelPrediction.from_scores(np.full(X.shape[0], float(handle.value)), self.threshold)

        probs = handle.predict_proba(X, **(params or {}))
        positive = list(handle.classes_).index(1)
        return LabelPrediction.from_scores(probs[:, positive], self.threshold)


class RandomLearner:
    """Ignores the features: scores are uniform draws from the task's stream."""

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        self.threshold = threshold

    def train(self, X: np.ndarray, y: np.ndarray, rng: np.random.Generator) -> Any:
        return float(np.mean(y)) if len(y) else 0.0

    def predict(
        self,
        handle: Any,
        X: np.ndarray,
        rng: np.random.Generator,
        params: Optional[Dict[str, Any]] = None,
    ) -> LabelPrediction:
        return LabelPrediction.from_scores(rng.random(X.shape[0]), self.threshold)


# =====================
# Registry
# =====================
BASE_ALGORITHMS: Dict[str, Callable[[], Any]] = {
    "LGBM": lambda: LGBMClassifier(
        n_estimators=100,
        learning_rate=0.1,
        class_weight="balanced",
        n_jobs=1,
        verbose=-1,
    ),
    "LR": lambda: LogisticRegression(solver="liblinear", class_weight="balanced"),
    "RF": lambda: RandomForestClassifier(n_estimators=100),
    "DT": lambda: DecisionTreeClassifier(),
    "SVM": lambda: SVC(probability=True),
}


def get_base_learner(algorithm, params: Optional[Dict[str, Any]] = None) -> BaseLearner:
    """
    Resolve ``algorithm`` into a base learner.

    Accepts a registry name (``"LGBM"``, ``"LR"``, ``"RF"``, ``"DT"``,
    ``"SVM"``, ``"RANDOM"``), an object already implementing
    ``train``/``predict``, or an unfitted scikit-learn classifier.
    """
    if isinstance(algorithm, str):
        name = algorithm.upper()
        if name == "RANDOM":
            return RandomLearner()
        if name not in BASE_ALGORITHMS:
            raise ValidationError(
                f"Unknown base algorithm '{algorithm}'. "
                f"Valid options: {sorted(BASE_ALGORITHMS) + ['RANDOM']}"
            )
        return SklearnLearner(BASE_ALGORITHMS[name](), params)

    if hasattr(algorithm, "train") and hasattr(algorithm, "predict"):
        return algorithm

    if hasattr(algorithm, "fit") and hasattr(algorithm, "predict_proba"):
        return SklearnLearner(algorithm, params)

    raise ValidationError(f"Unsupported base algorithm: {algorithm!r}")
