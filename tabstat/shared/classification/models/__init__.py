"""Classification models package"""

from .knn import KNNModel, KNNConfig
from .logistic_regression import LogisticRegressionModel, LogisticRegressionConfig

__all__ = [
    'KNNModel',
    'KNNConfig',
    'LogisticRegressionModel',
    'LogisticRegressionConfig'
]
