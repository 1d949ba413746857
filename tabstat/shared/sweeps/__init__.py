"""Repeated-trial hyperparameter sweeps for stochastic classifiers"""

from .errors import InvalidInput, EmptyTestSet, SweepCancelled
from .result import SweepResult
from .evaluator import HyperparameterSweepEvaluator, sweep, validate_sweep_inputs

__all__ = [
    "InvalidInput",
    "EmptyTestSet",
    "SweepCancelled",
    "SweepResult",
    "HyperparameterSweepEvaluator",
    "sweep",
    "validate_sweep_inputs",
]
