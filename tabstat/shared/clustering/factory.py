from typing import Any, Dict, Tuple, Type, Union

from .algorithms.kmeans import KMeansClustering, KMeansConfig
from .base import ClusteringAlgorithm, ClusteringConfig


class ClusteringFactory:
    """Looks up clustering algorithms by name and builds them from plain dicts or configs"""

    # name -> (algorithm class, config class)
    _registry: Dict[str, Tuple[Type[ClusteringAlgorithm], Type[ClusteringConfig]]] = {
        "kmeans": (KMeansClustering, KMeansConfig),
        "k-means": (KMeansClustering, KMeansConfig),
    }

    @classmethod
    def _lookup(cls, algorithm_name: str) -> Tuple[Type[ClusteringAlgorithm], Type[ClusteringConfig]]:
        key = algorithm_name.lower()
        if key not in cls._registry:
            raise ValueError(f"Unknown algorithm: {algorithm_name}. Available: {list(cls._registry)}")
        return cls._registry[key]

    @classmethod
    def create(cls, algorithm_name: str, config: Union[Dict[str, Any], ClusteringConfig]) -> ClusteringAlgorithm:
        """
        Build a clustering algorithm.

        Args:
            algorithm_name: Registered name, case-insensitive (e.g. "kmeans")
            config: Hyperparameters as a dict (e.g. from YAML) or a ready config object

        Returns:
            Unfitted algorithm instance

        Raises:
            ValueError: For an unknown name or a config of the wrong type
        """
        algorithm_class, config_class = cls._lookup(algorithm_name)

        if isinstance(config, dict):
            config = config_class(**config)
        elif not isinstance(config, ClusteringConfig):
            raise ValueError(f"Config must be dict or ClusteringConfig, got {type(config).__name__}")

        return algorithm_class(config)

    @classmethod
    def get_available_algorithms(cls) -> Dict[str, Type[ClusteringAlgorithm]]:
        return {name: algorithm_class for name, (algorithm_class, _) in cls._registry.items()}
