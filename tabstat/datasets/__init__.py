"""Labeled tabular dataset module."""

from .dataset import LabeledDataset
from .split import (
    SplitMethod,
    SplitParameters,
    train_test_indices,
    train_test_split,
    split_by_mask,
    subsample_dataset,
)
from .loading import load_csv, generate_smarket

__all__ = [
    "LabeledDataset",
    "SplitMethod",
    "SplitParameters",
    "train_test_indices",
    "train_test_split",
    "split_by_mask",
    "subsample_dataset",
    "load_csv",
    "generate_smarket",
]
