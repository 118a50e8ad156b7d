from __future__ import annotations

# =====================
# Standard library
# =====================
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

# =====================
# Third-party
# =====================
import numpy as np
import pandas as pd

# =====================
# Custom classes and functions
# =====================
from mlchains.utils.errors import SchemaMismatch, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetMeasures:
    num_instances: int
    num_attributes: int
    num_labels: int
    cardinality: float
    density: float


class DatasetView:
    """
    Read-only multi-label dataset:
    - attribute frame (instances x attributes)
    - label frame (instances x labels, 0/1)

    Build it with ``from_arrays``, ``from_frames`` or ``from_parquet``.
    """

    def __init__(self, attributes: pd.DataFrame, labels: pd.DataFrame, name: str = "dataset"):
        _check_unique([str(c) for c in attributes.columns], "attribute")
        _check_unique([str(c) for c in labels.columns], "label")
        if labels.shape[1] == 0:
            raise ValidationError("A multi-label dataset needs at least one label")

        if len(attributes) != len(labels):
            raise ValidationError(
                f"Attributes have {len(attributes)} rows but labels have {len(labels)}"
            )

        overlap = {str(c) for c in attributes.columns} & {str(c) for c in labels.columns}
        if overlap:
            raise ValidationError(f"Columns used both as attribute and label: {sorted(overlap)}")

        values = labels.to_numpy()
        if values.size and not np.isin(values, (0, 1)).all():
            raise ValidationError("Label values must be 0 or 1")

        self._attributes = attributes.reset_index(drop=True).copy()
        self._attributes.columns = [str(c) for c in attributes.columns]
        self._labels = labels.reset_index(drop=True).astype(int)
        self._labels.columns = [str(c) for c in labels.columns]
        self.name = name

    # =====================
    # Constructors
    # =====================
    @classmethod
    def from_arrays(
        cls,
        X,
        Y,
        attribute_names: Optional[Sequence[str]] = None,
        label_names: Optional[Sequence[str]] = None,
        name: str = "dataset",
    ) -> DatasetView:
        X = np.asarray(X, dtype=float)
        Y = np.asarray(Y)
        if X.ndim != 2 or Y.ndim != 2:
            raise ValidationError("Attributes and labels must be 2-D matrices")

        if attribute_names is None:
            attribute_names = [f"att{i + 1}" for i in range(X.shape[1])]
        if label_names is None:
            label_names = [f"lbl{i + 1}" for i in range(Y.shape[1])]

        if len(attribute_names) != X.shape[1] or len(label_names) != Y.shape[1]:
            raise ValidationError("Names must match the number of matrix columns")

        return cls(
            pd.DataFrame(X, columns=list(attribute_names)),
            pd.DataFrame(Y, columns=list(label_names)),
            name=name,
        )

    @classmethod
    def from_frames(cls, X: pd.DataFrame, Y: pd.DataFrame, name: str = "dataset") -> DatasetView:
        return cls(X, Y, name=name)

    @classmethod
    def from_parquet(cls, input_dir: Path, split: str = "train") -> DatasetView:
        """Load the ``X_<split>.parquet`` / ``y_<split>.parquet`` pair of a split directory."""
        input_dir = Path(input_dir)
        logger.info("Loading %s split from %s", split, input_dir)
        X = pd.read_parquet(input_dir / f"X_{split}.parquet")
        Y = pd.read_parquet(input_dir / f"y_{split}.parquet")
        logger.info("%s shape: %s", split, X.shape)
        return cls(X, Y, name=f"{input_dir.name}_{split}")

    # =====================
    # Accessors
    # =====================
    @property
    def attributes(self) -> pd.DataFrame:
        return self._attributes.copy()

    @property
    def labels(self) -> pd.DataFrame:
        return self._labels.copy()

    @property
    def attribute_names(self) -> List[str]:
        return [str(c) for c in self._attributes.columns]

    @property
    def label_names(self) -> List[str]:
        return [str(c) for c in self._labels.columns]

    @property
    def cardinality(self) -> float:
        if len(self._labels) == 0:
            return 0.0
        return float(self._labels.sum(axis=1).mean())

    @property
    def measures(self) -> DatasetMeasures:
        num_labels = self._labels.shape[1]
        return DatasetMeasures(
            num_instances=len(self),
            num_attributes=self._attributes.shape[1],
            num_labels=num_labels,
            cardinality=self.cardinality,
            density=self.cardinality / num_labels if num_labels else 0.0,
        )

    def attribute_matrix(self, names: Optional[Sequence[str]] = None) -> np.ndarray:
        frame = self._attributes if names is None else self._attributes[list(names)]
        return frame.to_numpy(dtype=float)

    def label_matrix(self, names: Optional[Sequence[str]] = None) -> np.ndarray:
        frame = self._labels if names is None else self._labels[list(names)]
        return frame.to_numpy(dtype=int)

    def subset(
        self,
        rows: Optional[Sequence[int]] = None,
        attributes: Optional[Sequence[str]] = None,
    ) -> DatasetView:
        """New view over ``rows`` (repeats allowed) and the named ``attributes``."""
        X = self._attributes if attributes is None else self._attributes[list(attributes)]
        Y = self._labels
        if rows is not None:
            rows = np.asarray(rows, dtype=int)
            X = X.iloc[rows]
            Y = Y.iloc[rows]
        return DatasetView(X, Y, name=self.name)

    def __len__(self) -> int:
        return len(self._attributes)


def _check_unique(columns, kind: str) -> None:
    duplicated = pd.Index(columns)[pd.Index(columns).duplicated()]
    if len(duplicated):
        raise ValidationError(f"Duplicated {kind} names: {list(duplicated)}")


def as_attribute_matrix(newdata, attribute_names: Sequence[str]) -> np.ndarray:
    """
    Project new data on ``attribute_names``.

    ``newdata`` may be a DatasetView, a DataFrame (columns picked by name)
    or a 2-D array, which must then have exactly the expected width.
    """
    if isinstance(newdata, DatasetView):
        newdata = newdata.attributes

    if isinstance(newdata, pd.DataFrame):
        columns = [str(c) for c in newdata.columns]
        missing = [name for name in attribute_names if name not in columns]
        if missing:
            raise SchemaMismatch(f"New data is missing attributes: {missing}")
        frame = newdata.copy()
        frame.columns = columns
        return frame[list(attribute_names)].to_numpy(dtype=float)

    X = np.asarray(newdata, dtype=float)
    if X.ndim == 1:
        X = X.reshape(1, -1)
    if X.ndim != 2 or X.shape[1] != len(attribute_names):
        raise SchemaMismatch(
            f"Expected {len(attribute_names)} attribute columns, got shape {X.shape}"
        )
    return X
