import numpy as np
from pydantic.dataclasses import dataclass
from pydantic import Field
from sklearn.neighbors import NearestNeighbors

from ..base import ClassificationModel, ClassificationConfig


@dataclass
class KNNConfig(ClassificationConfig):
    """Configuration for k-nearest-neighbors classifier"""

    n_neighbors: int = Field(1, description="Number of nearest training instances that vote")
    metric: str = Field("euclidean", description="Distance metric used for the neighbor search")
    algorithm: str = Field("auto", description="Neighbor search algorithm passed to scikit-learn")


class KNNModel(ClassificationModel):
    """
    k-nearest-neighbors majority-vote classifier with random tie-breaking.

    Ties are broken uniformly at random in two places: training rows are shuffled
    on fit so that equidistant neighbors are picked in random order, and tied vote
    counts are resolved with a random draw. Both use a generator seeded from
    `random_state`, so a fixed seed gives reproducible predictions.
    """

    def __init__(self, config: KNNConfig):
        super().__init__(config)
        self.config: KNNConfig = config
        self._rng = None
        self._train_label_idxs = None

    def fit(self, features: np.ndarray, labels: np.ndarray) -> "KNNModel":
        """
        Fit the neighbor index to the training features

        Args:
            features: Training features of shape (n_samples, n_features)
            labels: Training labels of shape (n_samples,)

        Returns:
            Self for method chaining
        """
        features = np.asarray(features, dtype=float)
        labels = self._validate_inputs(features, labels)

        if self.config.n_neighbors < 1:
            raise ValueError(f"n_neighbors must be positive, got {self.config.n_neighbors}")
        if self.config.n_neighbors > features.shape[0]:
            raise ValueError(
                f"n_neighbors={self.config.n_neighbors} exceeds number of training samples {features.shape[0]}"
            )

        self._rng = np.random.default_rng(self.config.random_state)
        order = self._rng.permutation(features.shape[0])

        self._model = NearestNeighbors(
            n_neighbors=self.config.n_neighbors,
            metric=self.config.metric,
            algorithm=self.config.algorithm,
        )
        self._model.fit(features[order])
        self._train_label_idxs = np.searchsorted(self._classes, labels[order])
        self._is_fitted = True

        return self

    def _vote_counts(self, features: np.ndarray) -> np.ndarray:
        """Number of neighbor votes per class, shape (n_samples, n_classes)"""
        features = np.asarray(features, dtype=float)
        if features.ndim != 2:
            raise ValueError("Features must be 2D array of shape (n_samples, n_features)")

        n_classes = len(self._classes)
        if features.shape[0] == 0:
            return np.zeros((0, n_classes), dtype=int)

        neighbor_idxs = self._model.kneighbors(features, return_distance=False)
        neighbor_labels = self._train_label_idxs[neighbor_idxs]
        return np.stack([np.bincount(row, minlength=n_classes) for row in neighbor_labels])

    def predict(self, features: np.ndarray) -> np.ndarray:
        """
        Predict labels by majority vote of the nearest training instances

        Args:
            features: Input features of shape (n_samples, n_features)

        Returns:
            Predicted labels of shape (n_samples,)
        """
        self._check_fitted()

        counts = self._vote_counts(features)
        winners = np.empty(counts.shape[0], dtype=int)
        for i, row in enumerate(counts):
            candidates = np.flatnonzero(row == row.max())
            winners[i] = candidates[0] if len(candidates) == 1 else self._rng.choice(candidates)

        return self._classes[winners]

    def predict_proba(self, features: np.ndarray) -> np.ndarray:
        """
        Fraction of neighbor votes per class

        Args:
            features: Input features of shape (n_samples, n_features)

        Returns:
            Vote fractions of shape (n_samples, n_classes)
        """
        self._check_fitted()
        return self._vote_counts(features) / self.config.n_neighbors
