from enum import Enum
from typing import Any, Optional, Tuple

import numpy as np
from pydantic.dataclasses import dataclass
from sklearn.model_selection import train_test_split as sklearn_train_test_split

from tabstat.datasets.dataset import LabeledDataset


class SplitMethod(Enum):
    """Enumeration of supported split creation methods."""

    RANDOM = "random"
    STRATIFIED = "stratified"
    MASK = "mask"


@dataclass(frozen=True)
class SplitParameters:
    """Parameters used to create a train/test split."""

    split_method: SplitMethod
    test_size: Optional[float] = None
    random_seed: Optional[int] = None


def train_test_indices(
    dataset: LabeledDataset,
    test_size: float = 0.25,
    random_state: Optional[int] = None,
    stratify: bool = False,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sorted row indices of a random train/test split.

    Sharing the indices lets several datasets built from the same rows (e.g. one
    with a class label and one with a numeric target) use an identical split.
    """
    if not 0 < test_size < 1:
        raise ValueError(f"test_size must be in (0, 1), got {test_size}")
    if len(dataset) < 2:
        raise ValueError(f"Cannot split dataset with {len(dataset)} instances")

    train_idxs, test_idxs = sklearn_train_test_split(
        np.arange(len(dataset)),
        test_size=test_size,
        random_state=random_state,
        stratify=dataset.labels if stratify else None,
    )
    return np.sort(train_idxs), np.sort(test_idxs)


def train_test_split(
    dataset: LabeledDataset,
    test_size: float = 0.25,
    random_state: Optional[int] = None,
    stratify: bool = False,
) -> Tuple[LabeledDataset, LabeledDataset]:
    """
    Randomly split a dataset into train and test datasets.

    Args:
        dataset: Dataset to split (left untouched)
        test_size: Fraction of instances assigned to the test dataset
        random_state: Random state for reproducible splitting
        stratify: If True, preserve label proportions in both splits

    Returns:
        Tuple of (train, test) datasets

    Raises:
        ValueError: If test_size is not in (0, 1) or dataset has fewer than 2 instances
    """
    train_idxs, test_idxs = train_test_indices(dataset, test_size, random_state, stratify)
    return (
        dataset.subset(train_idxs, name=f"{dataset.name}_train"),
        dataset.subset(test_idxs, name=f"{dataset.name}_test"),
    )


def split_by_mask(dataset: LabeledDataset, test_mask: Any) -> Tuple[LabeledDataset, LabeledDataset]:
    """
    Split a dataset with an explicit boolean mask, e.g. "Year == 2005" rows as test set.

    Args:
        dataset: Dataset to split
        test_mask: Boolean array-like of length len(dataset), True marks test instances

    Returns:
        Tuple of (train, test) datasets
    """
    test_mask = np.asarray(test_mask, dtype=bool)
    if test_mask.shape != (len(dataset),):
        raise ValueError(f"Mask must have shape ({len(dataset)},), got {test_mask.shape}")

    return (
        dataset.subset(~test_mask, name=f"{dataset.name}_train"),
        dataset.subset(test_mask, name=f"{dataset.name}_test"),
    )


def subsample_dataset(
    dataset: LabeledDataset,
    max_samples: int,
    random_seed: Optional[int] = None,
) -> LabeledDataset:
    """
    Create a subsampled dataset with at most max_samples instances.

    Args:
        dataset: The original dataset to subsample from
        max_samples: Maximum number of instances to keep
        random_seed: Random seed for reproducible subsampling

    Returns:
        New dataset; original row order is preserved among the kept rows

    Raises:
        ValueError: If max_samples is less than 1
    """
    if max_samples < 1:
        raise ValueError("max_samples must be at least 1")

    if max_samples >= len(dataset):
        return dataset.subset(np.arange(len(dataset)))

    rng = np.random.default_rng(random_seed)
    selected = rng.choice(len(dataset), size=max_samples, replace=False)
    return dataset.subset(np.sort(selected))
