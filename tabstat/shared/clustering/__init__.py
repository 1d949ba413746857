"""
Clustering module for tabular features

Provides a generic clustering interface that can be applied to any set of
numerical features.
"""

from .factory import ClusteringFactory
from .base import ClusteringAlgorithm, ClusteringConfig
from .evaluation import ClusteringEvaluator

from .algorithms.kmeans import KMeansClustering, KMeansConfig

__all__ = [
    "ClusteringFactory",
    "ClusteringAlgorithm",
    "ClusteringConfig",
    "ClusteringEvaluator",
    "KMeansClustering",
    "KMeansConfig",
]
