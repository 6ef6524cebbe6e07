"""
Test Suite for TabularDataset.

Covers construction checks, group-aware reordering and splitting, file
loading through pandas, and the synthetic dataset factory.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from hypergrid.data_handler import TabularDataset, create_synthetic_dataset
from hypergrid.exceptions import HyperGridDatasetError, OrderedDataError


def _dataset(n: int = 10, group_id=None, **kwargs) -> TabularDataset:
    features = np.arange(n * 2, dtype=np.float64).reshape(n, 2)
    return TabularDataset(
        features=features,
        target=np.arange(n, dtype=np.float64),
        group_id=None if group_id is None else np.asarray(group_id),
        **kwargs,
    )


# CONSTRUCTION
@pytest.mark.unit
class TestConstruction:
    """Tests for shape validation and defaults."""

    def test_default_feature_names(self):
        data = _dataset(3)

        assert data.feature_names == ("f0", "f1")
        assert data.n_objects == 3
        assert data.n_features == 2

    def test_non_matrix_features(self):
        with pytest.raises(HyperGridDatasetError, match="2D"):
            TabularDataset(features=np.zeros(3), target=np.zeros(3))

    def test_target_length_mismatch(self):
        with pytest.raises(HyperGridDatasetError, match="Target length"):
            TabularDataset(features=np.zeros((3, 1)), target=np.zeros(2))

    def test_group_length_mismatch(self):
        with pytest.raises(HyperGridDatasetError, match="group_id"):
            TabularDataset(features=np.zeros((3, 1)), target=np.zeros(3), group_id=np.zeros(2))

    def test_singleton_groups_without_ids(self):
        np.testing.assert_array_equal(_dataset(4).groups, [0, 1, 2, 3])


# GROUPS AND SHUFFLING
@pytest.mark.unit
class TestGroups:
    """Tests for group blocks and group-wise shuffling."""

    def test_group_blocks_in_first_appearance_order(self):
        data = _dataset(5, group_id=[2, 1, 2, 3, 1])

        blocks = data.group_blocks()

        assert [b.tolist() for b in blocks] == [[0, 2], [1, 4], [3]]

    def test_subset_keeps_rows_and_groups(self):
        data = _dataset(5, group_id=[2, 1, 2, 3, 1])

        sub = data.subset([4, 0])

        np.testing.assert_array_equal(sub.target, [4.0, 0.0])
        np.testing.assert_array_equal(sub.group_id, [1, 2])

    def test_shuffle_keeps_groups_contiguous(self):
        data = _dataset(12, group_id=np.arange(12) % 4)

        shuffled = data.shuffle(7)

        groups = shuffled.group_id.tolist()
        for g in range(4):
            positions = [i for i, v in enumerate(groups) if v == g]
            assert positions == list(range(positions[0], positions[0] + 3))
        assert sorted(shuffled.target.tolist()) == list(range(12))

    def test_shuffle_reproducible(self):
        data = _dataset(20)

        first = data.shuffle(3).target
        second = data.shuffle(np.random.default_rng(3)).target

        np.testing.assert_array_equal(first, second)


# TRAIN/TEST SPLIT
@pytest.mark.unit
class TestTrainTestSplit:
    """Tests for group-preserving splits."""

    def test_leading_share_is_train(self):
        train, test = _dataset(10).train_test_split(0.8)

        np.testing.assert_array_equal(train.target, np.arange(8))
        np.testing.assert_array_equal(test.target, [8, 9])

    def test_groups_not_broken(self):
        data = _dataset(6, group_id=[0, 0, 1, 1, 2, 2])

        train, test = data.train_test_split(0.5)

        assert set(train.group_id.tolist()).isdisjoint(test.group_id.tolist())
        assert train.n_objects == 2

    def test_ordered_data_rejected(self):
        with pytest.raises(OrderedDataError):
            _dataset(10, ordered=True).train_test_split(0.8)

    def test_empty_part_rejected(self):
        with pytest.raises(HyperGridDatasetError, match="empty part"):
            _dataset(2).train_test_split(0.3)

    def test_stratified_split_balances_classes(self):
        data = create_synthetic_dataset(n_objects=40, task="classification")

        train, test = data.train_test_split(0.5, stratified=True, seed=1)

        assert train.n_objects == 20
        assert sorted(np.bincount(test.target).tolist()) == [10, 10]

    def test_stratified_grouped_rejected(self):
        data = create_synthetic_dataset(n_objects=20, task="classification", n_groups=5)

        with pytest.raises(HyperGridDatasetError, match="grouped"):
            data.train_test_split(0.5, stratified=True)


# LOADING
@pytest.mark.unit
class TestLoading:
    """Tests for DataFrame and file loading."""

    @pytest.fixture
    def frame(self):
        return pd.DataFrame(
            {"a": [1.0, 2.0, np.nan], "b": [3, 4, 5], "g": [0, 0, 1], "y": [0.1, 0.2, 0.3]}
        )

    def test_from_frame_all_other_columns(self, frame):
        data = TabularDataset.from_frame(frame, target="y", group_column="g")

        assert data.feature_names == ("a", "b")
        assert np.isnan(data.features[2, 0])
        np.testing.assert_array_equal(data.group_id, [0, 0, 1])

    def test_from_frame_selected_columns(self, frame):
        data = TabularDataset.from_frame(frame, target="y", feature_columns=["b"])

        assert data.n_features == 1

    def test_missing_target_column(self, frame):
        with pytest.raises(HyperGridDatasetError, match="not found"):
            TabularDataset.from_frame(frame, target="label")

    def test_missing_feature_column(self, frame):
        with pytest.raises(HyperGridDatasetError, match="not found"):
            TabularDataset.from_frame(frame, target="y", feature_columns=["c"])

    def test_non_numeric_feature(self, frame):
        frame["c"] = ["x", "y", "z"]

        with pytest.raises(HyperGridDatasetError, match="numeric"):
            TabularDataset.from_frame(frame, target="y")

    def test_load_csv(self, frame, tmp_path):
        path = tmp_path / "data.csv"
        frame.to_csv(path, index=False)

        data = TabularDataset.load(path, target="y", group_column="g")

        assert data.n_objects == 3

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(HyperGridDatasetError, match="not found"):
            TabularDataset.load(tmp_path / "missing.csv", target="y")

    def test_load_unsupported_suffix(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text("y\n1\n")

        with pytest.raises(HyperGridDatasetError, match="Unsupported"):
            TabularDataset.load(path, target="y")


# SYNTHETIC DATA
@pytest.mark.unit
class TestSyntheticDataset:
    """Tests for the synthetic dataset factory."""

    def test_deterministic(self):
        first = create_synthetic_dataset(n_objects=30)
        second = create_synthetic_dataset(n_objects=30)

        np.testing.assert_array_equal(first.features, second.features)

    def test_classification_classes(self):
        data = create_synthetic_dataset(n_objects=60, task="classification", n_classes=3)

        assert set(data.target.tolist()) == {0, 1, 2}
        assert data.is_classification

    def test_nan_fraction_and_groups(self):
        data = create_synthetic_dataset(n_objects=50, nan_fraction=0.2, n_groups=5)

        assert np.isnan(data.features).any()
        assert len(data.group_blocks()) == 5
