"""Classification module for single-label classification"""

from .base import ClassificationModel, ClassificationConfig
from .factory import ClassificationFactory
from .evaluation import ClassificationEvaluator
from .sweep_adapter import make_classify_fn, make_knn_classify_fn

__all__ = [
    'ClassificationModel',
    'ClassificationConfig',
    'ClassificationFactory',
    'ClassificationEvaluator',
    'make_classify_fn',
    'make_knn_classify_fn',
]
