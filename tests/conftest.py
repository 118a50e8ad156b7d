"""Shared pytest fixtures for mlchains tests."""

from __future__ import annotations

import numpy as np
import pytest

from mlchains import DatasetView

# ============================================================================
# Dataset Fixtures
# ============================================================================


@pytest.fixture
def toy_dataset() -> DatasetView:
    """4 instances, 2 attributes, 3 labels; every label has both classes."""
    X = np.array(
        [
            [0.1, 1.0],
            [0.9, 0.2],
            [0.4, 0.8],
            [0.7, 0.3],
        ]
    )
    Y = np.array(
        [
            [1, 0, 1],
            [0, 1, 0],
            [1, 1, 0],
            [0, 1, 1],
        ]
    )
    return DatasetView.from_arrays(X, Y, label_names=["A", "B", "C"], name="toy")


@pytest.fixture
def small_dataset() -> DatasetView:
    """40 instances, 6 attributes, 4 labels loosely driven by the attributes."""
    rng = np.random.default_rng(7)
    X = rng.random((40, 6))
    Y = np.column_stack(
        [
            (X[:, 0] + X[:, 1] > 1.0),
            (X[:, 2] > 0.5),
            (X[:, 3] + 0.3 * X[:, 4] > 0.6),
            (X[:, 5] < 0.4),
        ]
    ).astype(int)
    return DatasetView.from_arrays(
        X,
        Y,
        attribute_names=[f"f{i}" for i in range(6)],
        label_names=["y1", "y2", "y3", "y4"],
        name="small",
    )
