from typing import Any, Callable, Optional

import numpy as np

from tabstat.datasets.dataset import LabeledDataset
from .factory import ClassificationFactory


def make_classify_fn(
    model_name: str, hyperparameter: str, **fixed_hyperparameters: Any
) -> Callable[..., np.ndarray]:
    """
    Build a classify function for hyperparameter sweeps from a factory model.

    The returned function has the signature
    ``classify_fn(train, test, value, random_state=None) -> predicted_labels``:
    it creates a fresh model with ``hyperparameter=value``, fits it on the train
    dataset and predicts one label per test instance. No state is shared
    between calls.

    Args:
        model_name: Name understood by ClassificationFactory
        hyperparameter: Name of the config field receiving the swept value
        **fixed_hyperparameters: Other config fields, held constant across calls

    Returns:
        Classify function
    """
    config_class = ClassificationFactory.get_model_config_class(model_name)
    if hyperparameter not in config_class.__dataclass_fields__:
        raise ValueError(f"Model '{model_name}' has no hyperparameter '{hyperparameter}'")

    def classify_fn(
        train: LabeledDataset, test: LabeledDataset, value: int, random_state: Optional[int] = None
    ) -> np.ndarray:
        hyperparameters = dict(fixed_hyperparameters)
        hyperparameters[hyperparameter] = value
        if random_state is not None:
            hyperparameters["random_state"] = random_state

        model = ClassificationFactory.create_with_defaults(model_name, **hyperparameters)
        model.fit(train.features, train.labels)
        return model.predict(test.features)

    classify_fn.__name__ = f"classify_{model_name}_by_{hyperparameter}"
    return classify_fn


def make_knn_classify_fn(**fixed_hyperparameters: Any) -> Callable[..., np.ndarray]:
    """Classify function sweeping the neighborhood size of KNNModel."""
    return make_classify_fn("knn", "n_neighbors", **fixed_hyperparameters)
