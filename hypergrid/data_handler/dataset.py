"""
Tabular Dataset Provider.

In-memory container for a supervised tabular dataset: a float feature
matrix, a target vector and optional group ids. Every object belongs to
exactly one group (objects without explicit group ids form singleton
groups), and all reordering and splitting operations keep groups intact.

Datasets are loaded from CSV or Parquet through pandas and are treated as
immutable: ``subset``, ``shuffle`` and ``train_test_split`` return new
instances.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split as sk_train_test_split

from ..core.paths import LOGGER_NAME
from ..exceptions import HyperGridDatasetError, OrderedDataError

if TYPE_CHECKING:  # pragma: no cover
    from .quantizer import QuantizationParams

logger = logging.getLogger(LOGGER_NAME)

_SUPPORTED_SUFFIXES = (".csv", ".parquet", ".pq")


# DATA CONTAINERS
@dataclass(frozen=True, eq=False)
class TabularDataset:
    """
    Immutable feature matrix + target vector with optional group ids.

    Attributes:
        features: Float matrix of shape (n_objects, n_features); NaN marks missing values.
        target: Target vector of length n_objects.
        feature_names: Column names, one per feature.
        group_id: Optional group identifier per object.
        ordered: Whether object order is meaningful (time series); such data
            cannot be searched with a train/test split.
        task: "regression" or "classification".
    """

    features: np.ndarray
    target: np.ndarray
    feature_names: tuple[str, ...] = ()
    group_id: np.ndarray | None = None
    ordered: bool = False
    task: str = "regression"

    def __post_init__(self) -> None:
        if self.features.ndim != 2:
            raise HyperGridDatasetError(
                f"Features must be a 2D matrix, got shape {self.features.shape}"
            )
        if len(self.target) != self.features.shape[0]:
            raise HyperGridDatasetError(
                f"Target length {len(self.target)} does not match "
                f"{self.features.shape[0]} feature rows"
            )
        if self.group_id is not None and len(self.group_id) != len(self.target):
            raise HyperGridDatasetError("group_id length does not match the number of objects")
        if not self.feature_names:
            names = tuple(f"f{i}" for i in range(self.features.shape[1]))
            object.__setattr__(self, "feature_names", names)

    @property
    def n_objects(self) -> int:
        return int(self.features.shape[0])

    @property
    def n_features(self) -> int:
        return int(self.features.shape[1])

    @property
    def is_classification(self) -> bool:
        return self.task == "classification"

    @property
    def groups(self) -> np.ndarray:
        """Group ids, with one singleton group per object when none are set."""
        if self.group_id is None:
            return np.arange(self.n_objects)
        return self.group_id

    # SUBSETS
    def subset(self, indices: Sequence[int] | np.ndarray) -> "TabularDataset":
        """Return a new dataset holding the objects at ``indices`` in that order."""
        idx = np.asarray(indices, dtype=np.int64)
        return replace(
            self,
            features=self.features[idx],
            target=self.target[idx],
            group_id=None if self.group_id is None else self.group_id[idx],
        )

    def group_blocks(self) -> list[np.ndarray]:
        """Object indices of each group, in order of first appearance."""
        _, first_pos, inverse = np.unique(self.groups, return_index=True, return_inverse=True)
        order = np.argsort(first_pos, kind="stable")
        rank = np.empty_like(order)
        rank[order] = np.arange(len(order))
        group_rank = rank[np.ravel(inverse)]
        objects_by_group = np.argsort(group_rank, kind="stable")
        counts = np.bincount(group_rank, minlength=len(order))
        return np.split(objects_by_group, np.cumsum(counts)[:-1])

    def shuffle(self, rng: np.random.Generator | int | None = None) -> "TabularDataset":
        """
        Shuffle objects by group: groups are permuted, objects stay
        contiguous and keep their relative order inside a group.

        Args:
            rng: numpy Generator or seed.

        Returns:
            Shuffled copy of the dataset.
        """
        if not isinstance(rng, np.random.Generator):
            rng = np.random.default_rng(rng)
        blocks = self.group_blocks()
        permutation = rng.permutation(len(blocks))
        return self.subset(np.concatenate([blocks[i] for i in permutation]))

    def train_test_split(
        self, train_part: float, stratified: bool = False, seed: int = 0
    ) -> tuple["TabularDataset", "TabularDataset"]:
        """
        Split into train and test parts without breaking groups.

        A plain split takes the leading ``train_part`` share of groups as
        train and the rest as test (shuffling, if wanted, happens before).
        A stratified split balances target classes across both parts and is
        only available for data without explicit groups.

        Args:
            train_part: Share of groups assigned to train, in (0, 1).
            stratified: Preserve class proportions (classification only).
            seed: Random seed for the stratified split.

        Returns:
            (train, test) datasets.

        Raises:
            OrderedDataError: If the dataset is ordered.
            HyperGridDatasetError: If a part would be empty or stratification
                is requested for grouped data.
        """
        if self.ordered:
            raise OrderedDataError("Params search for ordered objects data is not yet implemented")

        if stratified:
            if self.group_id is not None:
                raise HyperGridDatasetError("Stratified split is not supported for grouped data")
            train_idx, test_idx = sk_train_test_split(
                np.arange(self.n_objects),
                train_size=train_part,
                stratify=self.target,
                random_state=seed,
            )
            return self.subset(np.sort(train_idx)), self.subset(np.sort(test_idx))

        blocks = self.group_blocks()
        train_groups = int(len(blocks) * train_part)
        if train_groups == 0 or train_groups == len(blocks):
            raise HyperGridDatasetError(
                f"train_part={train_part} leaves an empty part for {len(blocks)} groups"
            )
        train_idx = np.concatenate(blocks[:train_groups])
        test_idx = np.concatenate(blocks[train_groups:])
        return self.subset(train_idx), self.subset(test_idx)

    # CONSTRUCTION
    @classmethod
    def from_frame(
        cls,
        frame: pd.DataFrame,
        target: str,
        feature_columns: Sequence[str] | None = None,
        group_column: str | None = None,
        ordered: bool = False,
        task: str = "regression",
    ) -> "TabularDataset":
        """
        Build a dataset from a pandas DataFrame.

        Non-numeric feature columns are rejected; missing values become NaN.
        """
        missing = [c for c in [target, group_column] if c is not None and c not in frame.columns]
        if missing:
            raise HyperGridDatasetError(f"Columns not found in data: {missing}")

        if feature_columns is None:
            excluded = {target, group_column}
            feature_columns = [c for c in frame.columns if c not in excluded]
        else:
            absent = [c for c in feature_columns if c not in frame.columns]
            if absent:
                raise HyperGridDatasetError(f"Feature columns not found in data: {absent}")

        feature_frame = frame[list(feature_columns)]
        non_numeric = [
            c for c in feature_frame.columns if not pd.api.types.is_numeric_dtype(feature_frame[c])
        ]
        if non_numeric:
            raise HyperGridDatasetError(f"Only numeric features are supported, got: {non_numeric}")

        return cls(
            features=feature_frame.to_numpy(dtype=np.float64),
            target=frame[target].to_numpy(),
            feature_names=tuple(str(c) for c in feature_columns),
            group_id=None if group_column is None else frame[group_column].to_numpy(),
            ordered=ordered,
            task=task,
        )

    @classmethod
    def load(
        cls,
        path: Path,
        target: str,
        feature_columns: Sequence[str] | None = None,
        group_column: str | None = None,
        ordered: bool = False,
        task: str = "regression",
    ) -> "TabularDataset":
        """
        Load a dataset from a CSV or Parquet file.

        Raises:
            HyperGridDatasetError: If the file is missing or has an unsupported suffix.
        """
        path = Path(path)
        if not path.exists():
            raise HyperGridDatasetError(f"Dataset file not found: {path}")

        suffix = path.suffix.lower()
        if suffix not in _SUPPORTED_SUFFIXES:
            raise HyperGridDatasetError(
                f"Unsupported dataset format '{suffix}', expected one of {_SUPPORTED_SUFFIXES}"
            )
        frame = pd.read_csv(path) if suffix == ".csv" else pd.read_parquet(path)
        logger.info(f"Loaded {len(frame)} rows × {frame.shape[1]} columns from {path.name}")

        return cls.from_frame(
            frame,
            target=target,
            feature_columns=feature_columns,
            group_column=group_column,
            ordered=ordered,
            task=task,
        )


@dataclass(frozen=True, eq=False)
class QuantizedDataset(TabularDataset):
    """
    Dataset whose ``features`` hold integer bin indices.

    Attributes:
        borders: Per-feature sorted border arrays used for binning.
        quantization: The QuantizationParams that produced the bins.
    """

    borders: tuple[np.ndarray, ...] = field(default_factory=tuple)
    quantization: "QuantizationParams | None" = None


# SYNTHETIC DATA
_SYNTHETIC_SEED = 42


def create_synthetic_dataset(
    n_objects: int = 200,
    n_features: int = 4,
    task: str = "regression",
    n_classes: int = 2,
    nan_fraction: float = 0.0,
    n_groups: int | None = None,
    seed: int = _SYNTHETIC_SEED,
) -> TabularDataset:
    """
    Create a small deterministic dataset for smoke runs and tests.

    Regression targets are a noisy linear function of the features;
    classification targets threshold that function into ``n_classes``
    quantile buckets.

    Args:
        n_objects: Number of rows.
        n_features: Number of numeric features.
        task: "regression" or "classification".
        n_classes: Number of classes for classification.
        nan_fraction: Share of feature cells replaced by NaN.
        n_groups: If given, assign objects round-robin to this many groups.
        seed: Random seed.

    Returns:
        TabularDataset
    """
    rng = np.random.default_rng(seed)
    features = rng.normal(size=(n_objects, n_features))
    weights = rng.uniform(0.5, 2.0, size=n_features)
    signal = features @ weights + rng.normal(scale=0.1, size=n_objects)

    if task == "classification":
        cuts = np.quantile(signal, np.linspace(0, 1, n_classes + 1)[1:-1])
        target = np.searchsorted(cuts, signal).astype(np.int64)
    else:
        target = signal

    if nan_fraction > 0:
        features[rng.random(features.shape) < nan_fraction] = np.nan

    group_id = None if n_groups is None else np.arange(n_objects) % n_groups
    return TabularDataset(features=features, target=target, group_id=group_id, task=task)
