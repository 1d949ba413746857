import numpy as np
from sklearn.metrics import (
    silhouette_score,
    calinski_harabasz_score,
    davies_bouldin_score,
    adjusted_rand_score,
)
from typing import Dict, Any, Optional


class ClusteringEvaluator:
    """Evaluates clustering quality using various metrics"""

    @staticmethod
    def evaluate(features: np.ndarray, labels: np.ndarray, true_labels: Optional[np.ndarray] = None) -> Dict[str, Any]:
        """
        Compute clustering evaluation metrics

        Args:
            features: Input features used for clustering
            labels: Predicted cluster labels
            true_labels: Ground truth labels (optional, for the adjusted Rand index)

        Returns:
            Dictionary containing evaluation metrics; internal metrics are None
            when fewer than 2 clusters were found
        """
        unique_labels, sizes = np.unique(labels, return_counts=True)
        n_clusters = len(unique_labels)

        result = {
            "n_samples": int(len(labels)),
            "n_clusters": int(n_clusters),
            "cluster_sizes": {str(label): int(size) for label, size in zip(unique_labels, sizes)},
        }

        if n_clusters < 2 or n_clusters >= len(labels):
            result.update(
                {
                    "silhouette_score": None,
                    "calinski_harabasz_score": None,
                    "davies_bouldin_score": None,
                }
            )
        else:
            result.update(
                {
                    "silhouette_score": float(silhouette_score(features, labels)),
                    "calinski_harabasz_score": float(calinski_harabasz_score(features, labels)),
                    "davies_bouldin_score": float(davies_bouldin_score(features, labels)),
                }
            )

        if true_labels is not None:
            result["adjusted_rand_score"] = float(adjusted_rand_score(true_labels, labels))

        return result
