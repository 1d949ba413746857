from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd


class LabeledDataset:
    """
    Immutable labeled tabular dataset for supervised classification.

    Holds a 2D numeric feature matrix with one row per instance and a 1D label
    array of the same length. Both arrays are copied on construction and marked
    read-only, so every transformation returns a new dataset instead of
    modifying this one.
    """

    def __init__(
        self,
        features: Any,
        labels: Any,
        feature_names: Optional[Sequence[str]] = None,
        name: str = "dataset",
    ):
        """
        Initialize dataset from feature and label arrays.

        Args:
            features: Array-like of shape (n_samples, n_features) with numeric values
            labels: Array-like of shape (n_samples,) with one class label per row
            feature_names: Optional column names, defaults to feature_0..feature_{n-1}
            name: Human-readable dataset name used in logs and reports

        Raises:
            ValueError: If shapes are inconsistent or features are non-numeric/contain NaN
        """
        features = np.array(features, copy=True)
        labels = np.array(labels, copy=True)

        if features.ndim != 2:
            raise ValueError(f"Features must be 2D array of shape (n_samples, n_features), got {features.ndim}D")
        if labels.ndim != 1:
            raise ValueError(f"Labels must be 1D array, got {labels.ndim}D")
        if features.shape[0] != labels.shape[0]:
            raise ValueError(f"Features and labels sample count mismatch: {features.shape[0]} vs {labels.shape[0]}")
        if features.size > 0 and not np.issubdtype(features.dtype, np.number):
            raise ValueError(f"Features must be numeric, got dtype {features.dtype}")
        if features.size > 0 and not np.all(np.isfinite(features.astype(float))):
            raise ValueError("Features contain NaN or infinite values")

        if feature_names is None:
            feature_names = [f"feature_{i}" for i in range(features.shape[1])]
        feature_names = [str(feature_name) for feature_name in feature_names]
        if len(feature_names) != features.shape[1]:
            raise ValueError(f"Expected {features.shape[1]} feature names, got {len(feature_names)}")

        features.setflags(write=False)
        labels.setflags(write=False)

        self._features = features
        self._labels = labels
        self._feature_names = tuple(feature_names)
        self._name = name

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        feature_columns: Sequence[str],
        label_column: str,
        name: str = "dataset",
    ) -> "LabeledDataset":
        """
        Build a dataset from selected DataFrame columns.

        Args:
            df: Source DataFrame (left untouched)
            feature_columns: Numeric columns to use as features, in order
            label_column: Column holding the class label
            name: Dataset name

        Returns:
            New LabeledDataset

        Raises:
            ValueError: If a column is missing
        """
        missing_cols = [col for col in list(feature_columns) + [label_column] if col not in df.columns]
        if missing_cols:
            raise ValueError(f"Columns not found in DataFrame: {missing_cols}. Available: {list(df.columns)}")

        features = df[list(feature_columns)].to_numpy(dtype=float)
        labels = df[label_column].to_numpy()
        return cls(features, labels, feature_names=feature_columns, name=name)

    @property
    def features(self) -> np.ndarray:
        return self._features

    @property
    def labels(self) -> np.ndarray:
        return self._labels

    @property
    def feature_names(self) -> List[str]:
        return list(self._feature_names)

    @property
    def name(self) -> str:
        return self._name

    @property
    def n_samples(self) -> int:
        return self._features.shape[0]

    @property
    def n_features(self) -> int:
        return self._features.shape[1]

    @property
    def label_set(self) -> frozenset:
        """Distinct labels present in the dataset."""
        return frozenset(self._labels.tolist())

    def __len__(self) -> int:
        """Return number of instances in the dataset."""
        return self.n_samples

    def subset(self, indices: Sequence[int], name: Optional[str] = None) -> "LabeledDataset":
        """
        Create a new dataset containing only the given rows, in the given order.

        Args:
            indices: Row indices (or boolean mask) into this dataset
            name: Name of the new dataset, defaults to this dataset's name

        Returns:
            New LabeledDataset
        """
        indices = np.asarray(indices)
        if indices.dtype != bool:
            indices = indices.astype(int)
        return LabeledDataset(
            self._features[indices],
            self._labels[indices],
            feature_names=self._feature_names,
            name=name or self._name,
        )

    def select_features(self, feature_names: Sequence[str]) -> "LabeledDataset":
        """Create a new dataset restricted to the named feature columns."""
        unknown = [feature_name for feature_name in feature_names if feature_name not in self._feature_names]
        if unknown:
            raise ValueError(f"Unknown features: {unknown}. Available: {list(self._feature_names)}")

        column_idxs = [self._feature_names.index(feature_name) for feature_name in feature_names]
        return LabeledDataset(
            self._features[:, column_idxs], self._labels, feature_names=feature_names, name=self._name
        )

    def with_features(self, features: np.ndarray) -> "LabeledDataset":
        """Create a new dataset with replaced feature values (e.g. after scaling) and the same labels."""
        features = np.asarray(features)
        if features.shape != self._features.shape:
            raise ValueError(f"Feature shape mismatch: expected {self._features.shape}, got {features.shape}")
        return LabeledDataset(features, self._labels, feature_names=self._feature_names, name=self._name)

    def to_sklearn_format(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return (X, y) arrays for use with scikit-learn estimators."""
        return self._features, self._labels

    def to_dataframe(self, label_column: str = "label") -> pd.DataFrame:
        """Return a new DataFrame with feature columns followed by the label column."""
        df = pd.DataFrame(self._features, columns=list(self._feature_names))
        df[label_column] = self._labels
        return df

    def get_label_distribution(self) -> Dict[str, int]:
        """
        Get label frequency distribution.

        Returns:
            Dictionary mapping label (as string) to its occurrence count
        """
        unique_labels, counts = np.unique(self._labels, return_counts=True)
        return {str(label): int(count) for label, count in zip(unique_labels, counts)}

    def get_metadata(self) -> Dict[str, Any]:
        """Get dataset metadata for logging and reports."""
        return {
            "dataset_name": self._name,
            "n_samples": self.n_samples,
            "n_features": self.n_features,
            "n_classes": len(self.label_set),
            "feature_names": self.feature_names,
            "label_distribution": self.get_label_distribution(),
        }

    def __repr__(self) -> str:
        """String representation of the dataset."""
        return (
            f"LabeledDataset("
            f"name='{self._name}', "
            f"n_samples={self.n_samples}, "
            f"n_features={self.n_features}, "
            f"n_classes={len(self.label_set)})"
        )
