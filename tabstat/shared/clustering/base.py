from abc import ABC, abstractmethod
from typing import Optional

import numpy as np
import pandas as pd
from pydantic import Field
from pydantic.dataclasses import dataclass

from tabstat.datasets.dataset import LabeledDataset


@dataclass
class ClusteringConfig:
    """Settings shared by all clustering algorithms"""

    random_state: Optional[int] = Field(42, description="Seed for any randomized initialization")


class ClusteringAlgorithm(ABC):
    """
    Unsupervised grouping of feature rows.

    Subclasses wrap one scikit-learn estimator in `self._model` and implement
    `fit` and `predict`. Class labels are never used for fitting; they only
    serve to compare the clusters afterwards (see `crosstab_with_labels`).
    """

    def __init__(self, config: ClusteringConfig):
        self.config = config
        self._model = None
        self._is_fitted = False

    @staticmethod
    def _as_matrix(features: np.ndarray) -> np.ndarray:
        features = np.asarray(features, dtype=float)
        if features.ndim != 2:
            raise ValueError(f"Features must be 2D array of shape (n_samples, n_features), got {features.ndim}D")
        return features

    @abstractmethod
    def fit(self, features: np.ndarray) -> "ClusteringAlgorithm":
        """Learn the clusters of the given rows and return self"""

    @abstractmethod
    def predict(self, features: np.ndarray) -> np.ndarray:
        """Cluster index for every row"""

    def fit_predict(self, features: np.ndarray) -> np.ndarray:
        return self.fit(features).predict(features)

    def cluster_dataset(self, dataset: LabeledDataset) -> np.ndarray:
        """Fit on the dataset's features and return one cluster index per instance"""
        return self.fit_predict(dataset.features)

    @staticmethod
    def crosstab_with_labels(clusters: np.ndarray, labels: np.ndarray) -> pd.DataFrame:
        """
        Count instances per (cluster, class label) pair.

        Rows are cluster indices, columns are class labels.
        """
        return pd.crosstab(
            pd.Series(np.asarray(clusters), name="cluster"), pd.Series(np.asarray(labels), name="label")
        )

    @property
    def is_fitted(self) -> bool:
        return self._is_fitted

    def get_cluster_centers(self) -> Optional[np.ndarray]:
        """Centroids of a fitted centroid-based model, None otherwise"""
        if not self._is_fitted:
            return None
        return getattr(self._model, "cluster_centers_", None)
