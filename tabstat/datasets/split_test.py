import numpy as np
import pytest

from tabstat.datasets.dataset import LabeledDataset
from tabstat.datasets.split import (
    split_by_mask,
    subsample_dataset,
    train_test_indices,
    train_test_split,
)


@pytest.fixture
def dataset():
    features = np.arange(40, dtype=float).reshape(20, 2)
    labels = np.array(["Up"] * 10 + ["Down"] * 10)
    return LabeledDataset(features, labels, name="market")


class TestTrainTestIndices:
    def test_partition(self, dataset):
        train_idxs, test_idxs = train_test_indices(dataset, test_size=0.25, random_state=0)
        assert len(test_idxs) == 5
        assert sorted(np.concatenate([train_idxs, test_idxs]).tolist()) == list(range(20))
        assert train_idxs.tolist() == sorted(train_idxs.tolist())

    def test_reproducible(self, dataset):
        first = train_test_indices(dataset, random_state=3)
        second = train_test_indices(dataset, random_state=3)
        np.testing.assert_array_equal(first[1], second[1])

    def test_stratified(self, dataset):
        _, test_idxs = train_test_indices(dataset, test_size=0.5, random_state=1, stratify=True)
        test_labels = dataset.labels[test_idxs]
        assert (test_labels == "Up").sum() == 5

    @pytest.mark.parametrize("test_size", [0.0, 1.0, 1.5])
    def test_invalid_test_size(self, dataset, test_size):
        with pytest.raises(ValueError, match="test_size"):
            train_test_indices(dataset, test_size=test_size)

    def test_too_small(self):
        with pytest.raises(ValueError, match="Cannot split"):
            train_test_indices(LabeledDataset(np.zeros((1, 1)), np.array(["Up"])))


class TestTrainTestSplit:
    def test_names_and_sizes(self, dataset):
        train, test = train_test_split(dataset, test_size=0.25, random_state=0)
        assert (len(train), len(test)) == (15, 5)
        assert train.name == "market_train"
        assert test.name == "market_test"


class TestSplitByMask:
    def test_mask(self, dataset):
        test_mask = dataset.features[:, 0] >= 30
        train, test = split_by_mask(dataset, test_mask)
        assert len(test) == 5
        assert len(train) == 15
        assert test.features[:, 0].min() == 30.0

    def test_mask_shape_mismatch(self, dataset):
        with pytest.raises(ValueError, match="Mask must have shape"):
            split_by_mask(dataset, [True, False])


class TestSubsampleDataset:
    def test_subsample(self, dataset):
        subsampled = subsample_dataset(dataset, 6, random_seed=0)
        assert len(subsampled) == 6
        first_column = subsampled.features[:, 0].tolist()
        assert first_column == sorted(first_column)

    def test_no_subsample_needed(self, dataset):
        subsampled = subsample_dataset(dataset, 100)
        np.testing.assert_array_equal(subsampled.features, dataset.features)

    def test_invalid_max_samples(self, dataset):
        with pytest.raises(ValueError):
            subsample_dataset(dataset, 0)
