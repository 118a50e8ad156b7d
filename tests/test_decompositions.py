"""Tests for Binary Relevance and Classifier Chains."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest
from sklearn.linear_model import LogisticRegression

from mlchains import (
    BinaryModel,
    ChainEnsemblePipeline,
    ChainModel,
    DatasetView,
    ModelKind,
    PredictionResult,
    SchemaMismatch,
    TrainingFailure,
    ValidationError,
    predict,
    train_binary,
    train_chain,
    train_ensemble,
)
from mlchains.utils.base_learner import ConstantModel, LabelPrediction

# ============================================================================
# Test learners
# ============================================================================


class EchoLearner:
    """Scores every instance with its last feature; records the widths it predicts on."""

    def __init__(self):
        self.widths = []

    def train(self, X, y, rng):
        return X.shape[1]

    def predict(self, handle, X, rng, params=None):
        assert X.shape[1] == handle
        self.widths.append(X.shape[1])
        return LabelPrediction.from_scores(np.clip(X[:, -1], 0.0, 1.0))


class ParamsRecordingLearner:
    """Constant scores; records the prediction params of every call."""

    def __init__(self):
        self.calls = []

    def train(self, X, y, rng):
        return 0.75

    def predict(self, handle, X, rng, params=None):
        self.calls.append(params)
        return LabelPrediction.from_scores(np.full(X.shape[0], handle))


class InvertibleLogisticRegression(LogisticRegression):
    def predict_proba(self, X, invert=False):
        probs = super().predict_proba(X)
        return probs[:, ::-1] if invert else probs


class FailingLearner:
    def train(self, X, y, rng):
        raise RuntimeError("solver diverged")

    def predict(self, handle, X, rng, params=None):
        raise RuntimeError("never trained")


# ============================================================================
# Binary Relevance
# ============================================================================


def test_binary_model_structure(small_dataset: DatasetView) -> None:
    model = train_binary(small_dataset, "LR", seed=1)

    assert isinstance(model, BinaryModel)
    assert model.kind == ModelKind.BINARY
    assert model.labels == small_dataset.label_names
    assert set(model.models) == set(small_dataset.label_names)


def test_binary_prediction_shape_and_ranges(small_dataset: DatasetView) -> None:
    model = train_binary(small_dataset, "LR", seed=1)

    result = predict(model, small_dataset)

    assert isinstance(result, PredictionResult)
    assert result.scores.shape == (40, 4)
    assert result.labels == small_dataset.label_names
    assert ((result.scores >= 0) & (result.scores <= 1)).all()
    np.testing.assert_array_equal(result.bipartitions, (result.scores >= 0.5).astype(int))


def test_binary_label_subset_keeps_dataset_order(small_dataset: DatasetView) -> None:
    model = train_binary(small_dataset, "LR", labels=["y3", "y1"])

    assert model.labels == ["y1", "y3"]
    assert predict(model, small_dataset).labels == ["y1", "y3"]


def test_binary_label_subset_must_be_known(small_dataset: DatasetView) -> None:
    with pytest.raises(ValidationError):
        train_binary(small_dataset, "LR", labels=["y1", "nope"])


def test_constant_label_uses_constant_model() -> None:
    dataset = DatasetView.from_arrays(
        np.array([[0.0], [1.0], [2.0], [3.0]]),
        np.array([[0, 1], [1, 1], [0, 1], [1, 1]]),
        label_names=["varies", "always"],
    )

    model = train_binary(dataset, "LR")
    result = predict(model, dataset)

    assert model.models["always"] == ConstantModel(1)
    np.testing.assert_array_equal(result.bipartitions[:, 1], [1, 1, 1, 1])


def test_sklearn_estimator_can_be_passed_directly(small_dataset: DatasetView) -> None:
    model = train_binary(small_dataset, LogisticRegression(), base_params={"C": 0.5})

    assert model.models["y1"].get_params()["C"] == 0.5


def test_unknown_base_algorithm(small_dataset: DatasetView) -> None:
    with pytest.raises(ValidationError):
        train_binary(small_dataset, "PERCEPTRONISH")


def test_training_failure_propagates(small_dataset: DatasetView) -> None:
    with pytest.raises(TrainingFailure):
        train_binary(small_dataset, FailingLearner())


def test_prediction_schema_mismatch(small_dataset: DatasetView) -> None:
    model = train_binary(small_dataset, "LR")

    with pytest.raises(SchemaMismatch):
        predict(model, small_dataset.attributes.drop(columns=["f2"]))
    with pytest.raises(SchemaMismatch):
        predict(model, np.zeros((3, 5)))


def test_prediction_from_frame_selects_columns_by_name(small_dataset: DatasetView) -> None:
    model = train_binary(small_dataset, "LR", seed=3)
    shuffled = small_dataset.attributes[["f5", "f0", "f3", "f1", "f4", "f2"]]

    from_view = predict(model, small_dataset)
    from_frame = predict(model, shuffled)

    np.testing.assert_allclose(from_view.scores, from_frame.scores)


# ============================================================================
# Classifier Chains
# ============================================================================


@pytest.mark.parametrize(
    "chain",
    [
        ["A", "B"],
        ["A", "B", "C", "D"],
        ["A", "B", "B"],
        ["A", "B", "C", "C"],
    ],
    ids=["missing-label", "unknown-label", "duplicate", "duplicate-extra"],
)
def test_invalid_chain(toy_dataset: DatasetView, chain) -> None:
    with pytest.raises(ValidationError):
        train_chain(toy_dataset, chain, "LR")


def test_default_chain_is_label_order(toy_dataset: DatasetView) -> None:
    model = train_chain(toy_dataset, base_algorithm="LR")

    assert isinstance(model, ChainModel)
    assert model.kind == ModelKind.CHAIN
    assert model.chain == ["A", "B", "C"]


def test_chain_links_see_previous_labels(toy_dataset: DatasetView) -> None:
    model = train_chain(toy_dataset, ["C", "A", "B"], EchoLearner())

    assert model.models == [2, 3, 4]


def test_chain_prediction_feeds_predicted_bipartitions(toy_dataset: DatasetView) -> None:
    model = train_chain(toy_dataset, ["C", "A", "B"], EchoLearner())

    result = predict(model, toy_dataset)

    assert model.learner.widths == [2, 3, 4]
    # C echoes att2; A and B echo the bipartition predicted right before them
    expected_c = np.array([1.0, 0.2, 0.8, 0.3])
    np.testing.assert_allclose(result.scores[:, 2], expected_c)
    np.testing.assert_array_equal(result.scores[:, 0], (expected_c >= 0.5).astype(float))
    np.testing.assert_array_equal(result.scores[:, 1], result.scores[:, 0])


def test_chain_result_uses_dataset_label_order(small_dataset: DatasetView) -> None:
    chain = ["y4", "y2", "y1", "y3"]
    model = train_chain(small_dataset, chain, "LR", seed=2)

    result = predict(model, small_dataset)

    assert model.chain == chain
    assert result.labels == small_dataset.label_names


def test_chain_prediction_ignores_cores(small_dataset: DatasetView) -> None:
    model = train_chain(small_dataset, base_algorithm="LR", seed=2)

    one = predict(model, small_dataset, cores=1)
    many = predict(model, small_dataset, cores=4)

    np.testing.assert_array_equal(one.bipartitions, many.bipartitions)


def test_chain_training_is_sequential_independent(small_dataset: DatasetView) -> None:
    one = train_chain(small_dataset, base_algorithm="RF", cores=1, seed=11)
    two = train_chain(small_dataset, base_algorithm="RF", cores=2, seed=11)

    np.testing.assert_array_equal(
        predict(one, small_dataset).scores,
        predict(two, small_dataset).scores,
    )


def test_first_argument_must_be_a_dataset() -> None:
    with pytest.raises(ValidationError):
        train_chain(pd.DataFrame({"a": [1]}), base_algorithm="LR")


# ============================================================================
# Prediction params
# ============================================================================


@pytest.mark.parametrize("trainer", [train_binary, train_chain])
def test_predict_params_reach_the_learner(small_dataset: DatasetView, trainer) -> None:
    learner = ParamsRecordingLearner()
    model = trainer(small_dataset, base_algorithm=learner, seed=1)

    predict(model, small_dataset, predict_params={"num_iteration": 3})

    assert learner.calls == [{"num_iteration": 3}] * 4


def test_predict_params_default_to_none(small_dataset: DatasetView) -> None:
    learner = ParamsRecordingLearner()
    model = train_binary(small_dataset, base_algorithm=learner, seed=1)

    predict(model, small_dataset)

    assert learner.calls == [None] * 4


def test_predict_params_are_forwarded_to_predict_proba(small_dataset: DatasetView) -> None:
    model = train_binary(small_dataset, base_algorithm=InvertibleLogisticRegression(), seed=1)

    plain = predict(model, small_dataset)
    inverted = predict(model, small_dataset, predict_params={"invert": True})

    np.testing.assert_allclose(inverted.scores, 1 - plain.scores)


def test_pipeline_forwards_predict_params(small_dataset: DatasetView) -> None:
    learner = ParamsRecordingLearner()
    model = train_ensemble(small_dataset, m=2, kind="binary", base_algorithm=learner, seed=3)

    ChainEnsemblePipeline(model, predict_params={"num_iteration": 3}).predict(small_dataset)

    assert learner.calls == [{"num_iteration": 3}] * 8
