from typing import Optional

import numpy as np
from pydantic import Field
from pydantic.dataclasses import dataclass
from sklearn.cluster import KMeans

from ..base import ClusteringAlgorithm, ClusteringConfig


@dataclass
class KMeansConfig(ClusteringConfig):
    """K-means settings; `n_init` restarts are run and the lowest-inertia one is kept"""

    n_clusters: int = Field(3, description="Number of clusters")
    n_init: int = Field(20, description="Number of random restarts")
    max_iter: int = Field(300, description="Iteration cap per restart")
    tol: float = Field(1e-4, description="Convergence tolerance on centroid movement")
    init: str = Field("k-means++", description="Centroid seeding, 'k-means++' or 'random'")


class KMeansClustering(ClusteringAlgorithm):
    """Partition rows into `n_clusters` groups around centroids"""

    def __init__(self, config: KMeansConfig):
        super().__init__(config)
        self.config: KMeansConfig = config

    def fit(self, features: np.ndarray) -> "KMeansClustering":
        features = self._as_matrix(features)
        if features.shape[0] < self.config.n_clusters:
            raise ValueError(f"Need at least {self.config.n_clusters} samples, got {features.shape[0]}")

        self._model = KMeans(
            n_clusters=self.config.n_clusters,
            n_init=self.config.n_init,
            max_iter=self.config.max_iter,
            tol=self.config.tol,
            init=self.config.init,
            random_state=self.config.random_state,
        ).fit(features)
        self._is_fitted = True
        return self

    def predict(self, features: np.ndarray) -> np.ndarray:
        if not self._is_fitted:
            raise ValueError("Model must be fitted before prediction")
        return self._model.predict(self._as_matrix(features))

    @property
    def inertia(self) -> Optional[float]:
        """Total within-cluster sum of squares"""
        return float(self._model.inertia_) if self._is_fitted else None
