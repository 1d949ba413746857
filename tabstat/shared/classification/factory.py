from typing import Any, Dict, Tuple, Type, Union

from .base import ClassificationConfig, ClassificationModel
from .models import KNNConfig, KNNModel, LogisticRegressionConfig, LogisticRegressionModel

_KNN = (KNNModel, KNNConfig)
_LOGISTIC = (LogisticRegressionModel, LogisticRegressionConfig)


class ClassificationFactory:
    """
    Builds classifiers by name.

    Names are case-insensitive and several aliases point to the same model,
    e.g. "logit" and "multinomial" both give logistic regression, which fits a
    multinomial model whenever there are more than two classes.
    """

    # name -> (model class, config class)
    _registry: Dict[str, Tuple[Type[ClassificationModel], Type[ClassificationConfig]]] = {
        "knn": _KNN,
        "k-nearest-neighbors": _KNN,
        "nearest_neighbors": _KNN,
        "logistic_regression": _LOGISTIC,
        "logistic-regression": _LOGISTIC,
        "logit": _LOGISTIC,
        "multinomial": _LOGISTIC,
    }

    @classmethod
    def _lookup(cls, model_name: str) -> Tuple[Type[ClassificationModel], Type[ClassificationConfig]]:
        key = model_name.lower()
        if key not in cls._registry:
            raise ValueError(f"Unknown model: {model_name}. Available: {list(cls._registry)}")
        return cls._registry[key]

    @classmethod
    def create(cls, model_name: str, config: Union[Dict[str, Any], ClassificationConfig]) -> ClassificationModel:
        """
        Build an unfitted classifier.

        Args:
            model_name: Registered name or alias
            config: Hyperparameters as a dict or a ready config object

        Returns:
            Classifier instance

        Raises:
            ValueError: For an unknown name or a config of the wrong type
        """
        model_class, config_class = cls._lookup(model_name)

        if isinstance(config, dict):
            config = config_class(**config)
        elif not isinstance(config, ClassificationConfig):
            raise ValueError(f"Config must be dict or ClassificationConfig, got {type(config).__name__}")

        return model_class(config)

    @classmethod
    def create_with_defaults(cls, model_name: str, **kwargs) -> ClassificationModel:
        """Build a classifier from its default config with `kwargs` overriding single fields"""
        return cls.create(model_name, cls.get_model_config_class(model_name)(**kwargs))

    @classmethod
    def get_model_config_class(cls, model_name: str) -> Type[ClassificationConfig]:
        return cls._lookup(model_name)[1]

    @classmethod
    def get_available_models(cls) -> Dict[str, Type[ClassificationModel]]:
        return {name: model_class for name, (model_class, _) in cls._registry.items()}
