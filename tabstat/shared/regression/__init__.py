"""Regression module for continuous targets"""

from .linear_regression import LinearRegressionModel, LinearRegressionConfig
from .evaluation import RegressionEvaluator

__all__ = [
    "LinearRegressionModel",
    "LinearRegressionConfig",
    "RegressionEvaluator",
]
