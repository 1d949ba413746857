import numpy as np
import pandas as pd
import pytest

from tabstat.datasets.dataset import LabeledDataset


@pytest.fixture
def dataset():
    features = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0], [7.0, 8.0]])
    labels = np.array(["Up", "Down", "Up", "Up"])
    return LabeledDataset(features, labels, feature_names=["Lag1", "Lag2"], name="smarket")


class TestLabeledDatasetConstruction:
    def test_basic_properties(self, dataset):
        assert len(dataset) == 4
        assert dataset.n_features == 2
        assert dataset.feature_names == ["Lag1", "Lag2"]
        assert dataset.label_set == frozenset({"Up", "Down"})

    def test_default_feature_names(self):
        dataset = LabeledDataset(np.zeros((2, 3)), np.array([0, 1]))
        assert dataset.feature_names == ["feature_0", "feature_1", "feature_2"]

    def test_arrays_are_copied_and_read_only(self):
        features = np.array([[1.0], [2.0]])
        dataset = LabeledDataset(features, np.array(["a", "b"]))
        features[0, 0] = 99.0

        assert dataset.features[0, 0] == 1.0
        with pytest.raises(ValueError):
            dataset.features[0, 0] = 5.0

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="sample count mismatch"):
            LabeledDataset(np.zeros((3, 2)), np.array([0, 1]))

    def test_one_dimensional_features(self):
        with pytest.raises(ValueError, match="2D"):
            LabeledDataset(np.zeros(3), np.array([0, 1, 2]))

    def test_non_numeric_features(self):
        with pytest.raises(ValueError, match="numeric"):
            LabeledDataset(np.array([["a"], ["b"]]), np.array([0, 1]))

    def test_nan_features(self):
        with pytest.raises(ValueError, match="NaN"):
            LabeledDataset(np.array([[1.0], [np.nan]]), np.array([0, 1]))

    def test_empty_dataset(self):
        dataset = LabeledDataset(np.empty((0, 2)), np.array([]))
        assert len(dataset) == 0
        assert dataset.n_features == 2


class TestLabeledDatasetFromDataFrame:
    def test_from_dataframe(self):
        df = pd.DataFrame({"Lag1": [0.1, -0.2], "Volume": [1, 2], "Direction": ["Up", "Down"]})
        dataset = LabeledDataset.from_dataframe(df, ["Lag1", "Volume"], "Direction", name="market")

        assert dataset.name == "market"
        assert dataset.features.dtype == float
        assert dataset.labels.tolist() == ["Up", "Down"]

    def test_missing_column(self):
        df = pd.DataFrame({"Lag1": [0.1]})
        with pytest.raises(ValueError, match="Columns not found"):
            LabeledDataset.from_dataframe(df, ["Lag1"], "Direction")


class TestLabeledDatasetTransformations:
    def test_subset_preserves_order(self, dataset):
        subset = dataset.subset([3, 0], name="picked")
        np.testing.assert_array_equal(subset.features, [[7.0, 8.0], [1.0, 2.0]])
        assert subset.labels.tolist() == ["Up", "Up"]
        assert subset.name == "picked"
        assert len(dataset) == 4

    def test_subset_with_mask(self, dataset):
        subset = dataset.subset(np.array([True, False, False, True]))
        assert len(subset) == 2
        assert subset.name == "smarket"

    def test_empty_subset(self, dataset):
        subset = dataset.subset([])
        assert len(subset) == 0
        assert subset.n_features == 2

    def test_select_features(self, dataset):
        selected = dataset.select_features(["Lag2"])
        assert selected.feature_names == ["Lag2"]
        np.testing.assert_array_equal(selected.features[:, 0], [2.0, 4.0, 6.0, 8.0])

    def test_select_unknown_feature(self, dataset):
        with pytest.raises(ValueError, match="Unknown features"):
            dataset.select_features(["Volume"])

    def test_with_features(self, dataset):
        replaced = dataset.with_features(dataset.features * 2)
        assert replaced.features[3, 1] == 16.0
        np.testing.assert_array_equal(replaced.labels, dataset.labels)

    def test_with_features_shape_mismatch(self, dataset):
        with pytest.raises(ValueError, match="shape mismatch"):
            dataset.with_features(np.zeros((4, 3)))

    def test_to_sklearn_format(self, dataset):
        X, y = dataset.to_sklearn_format()
        assert X.shape == (4, 2)
        assert y.tolist() == ["Up", "Down", "Up", "Up"]

    def test_to_dataframe(self, dataset):
        df = dataset.to_dataframe(label_column="Direction")
        assert list(df.columns) == ["Lag1", "Lag2", "Direction"]
        assert len(df) == 4


class TestLabeledDatasetMetadata:
    def test_label_distribution(self, dataset):
        assert dataset.get_label_distribution() == {"Down": 1, "Up": 3}

    def test_metadata(self, dataset):
        metadata = dataset.get_metadata()
        assert metadata["dataset_name"] == "smarket"
        assert metadata["n_samples"] == 4
        assert metadata["n_classes"] == 2

    def test_repr(self, dataset):
        assert repr(dataset) == "LabeledDataset(name='smarket', n_samples=4, n_features=2, n_classes=2)"
