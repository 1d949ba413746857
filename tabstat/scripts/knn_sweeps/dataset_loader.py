import logging
import os
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from tabstat.datasets.dataset import LabeledDataset
from tabstat.datasets.loading import generate_smarket, load_csv
from tabstat.datasets.split import SplitMethod, SplitParameters, subsample_dataset, train_test_indices
from tabstat.shared.preprocessing.config import ImputationConfig, PreprocessingConfig
from tabstat.shared.preprocessing.fit_preprocessor import FitPreprocessor
from tabstat.shared.preprocessing.imputation import drop_missing, impute_missing, missing_value_summary
from .config import DatasetSourceConfig, KNNSweepConfig, SplitConfig


logger = logging.getLogger(__name__)


def validate_dataset_source(dataset_config: DatasetSourceConfig) -> None:
    """
    Validate that the configured dataset source can be read.

    Raises:
        FileNotFoundError: If a CSV source file doesn't exist
    """
    if dataset_config.source == "csv" and not os.path.exists(dataset_config.path):
        raise FileNotFoundError(f"Dataset file not found: {dataset_config.path}")


def load_source_dataframe(dataset_config: DatasetSourceConfig, random_state: Optional[int] = 42) -> pd.DataFrame:
    """Read the raw table of the configured source"""
    if dataset_config.source == "smarket":
        logger.debug(f"Generating synthetic Smarket data with {dataset_config.smarket_days} trading days")
        return generate_smarket(n_days=dataset_config.smarket_days, random_state=random_state)

    logger.debug(f"Loading dataset: {dataset_config.path}")
    return load_csv(dataset_config.path, na_values=dataset_config.na_values)


def clean_dataframe(
    df: pd.DataFrame,
    dataset_config: DatasetSourceConfig,
    imputation_config: ImputationConfig,
    extra_columns: Optional[List[str]] = None,
) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """
    Impute and drop missing values in the columns used for modeling.

    Args:
        df: Raw DataFrame
        dataset_config: Source configuration naming feature and label columns
        imputation_config: Imputation strategies and drop behavior
        extra_columns: Further columns that must be complete, e.g. a regression target

    Returns:
        Tuple of (cleaned DataFrame, cleaning info)
    """
    used_columns = list(dataset_config.feature_columns) + [dataset_config.label_column]
    used_columns += [col for col in (extra_columns or []) if col not in used_columns]
    missing_cols = [col for col in used_columns if col not in df.columns]
    if missing_cols:
        raise ValueError(f"Configured columns not found in dataset: {missing_cols}. Available: {list(df.columns)}")

    summary = missing_value_summary(df[used_columns])
    logger.debug(f"Missing values before cleaning: {summary['total_missing']} in {summary['rows_with_missing']} rows")

    strategies = imputation_config.strategies or {}
    unused = [col for col in strategies if col not in used_columns]
    if unused:
        logger.warning(f"Imputation configured for unused columns: {unused}")

    cleaned = impute_missing(df, strategies) if strategies else df.copy()

    n_rows_before = len(cleaned)
    if imputation_config.drop_remaining:
        cleaned = drop_missing(cleaned, columns=used_columns)

    info = {
        "original_n_rows": n_rows_before,
        "missing_values_before_cleaning": summary["total_missing"],
        "imputed_columns": sorted(strategies),
        "rows_dropped_missing": n_rows_before - len(cleaned),
    }
    return cleaned, info


def compute_split_indices(
    dataset: LabeledDataset,
    df: pd.DataFrame,
    split_config: SplitConfig,
    random_state: Optional[int] = 42,
) -> Tuple[np.ndarray, np.ndarray, SplitParameters]:
    """
    Row indices of the train and test sets.

    Args:
        dataset: Dataset built from the rows of df, in the same order
        df: Cleaned DataFrame the mask query is evaluated against
        split_config: Split configuration
        random_state: Random state for random and stratified splits

    Returns:
        Tuple of (train indices, test indices, split parameters)
    """
    split_method = split_config.split_method

    if split_method == SplitMethod.MASK:
        try:
            test_mask = pd.Series(df.eval(split_config.test_query)).to_numpy(dtype=bool)
        except Exception as e:
            raise ValueError(f"Invalid test_query '{split_config.test_query}': {e}") from e
        if test_mask.shape != (len(dataset),):
            raise ValueError(f"test_query '{split_config.test_query}' did not produce one boolean per row")
        return np.flatnonzero(~test_mask), np.flatnonzero(test_mask), SplitParameters(split_method=split_method)

    train_idxs, test_idxs = train_test_indices(
        dataset,
        test_size=split_config.test_size,
        random_state=random_state,
        stratify=split_method == SplitMethod.STRATIFIED,
    )
    return (
        train_idxs,
        test_idxs,
        SplitParameters(split_method=split_method, test_size=split_config.test_size, random_seed=random_state),
    )


def split_dataset(
    dataset: LabeledDataset,
    df: pd.DataFrame,
    split_config: SplitConfig,
    random_state: Optional[int] = 42,
) -> Tuple[LabeledDataset, LabeledDataset, SplitParameters]:
    """
    Divide a dataset into train and test sets.

    Returns:
        Tuple of (train, test, split parameters)
    """
    train_idxs, test_idxs, split_parameters = compute_split_indices(dataset, df, split_config, random_state)
    return (
        dataset.subset(train_idxs, name=f"{dataset.name}_train"),
        dataset.subset(test_idxs, name=f"{dataset.name}_test"),
        split_parameters,
    )


def load_and_preprocess_split(config: KNNSweepConfig) -> Tuple[LabeledDataset, LabeledDataset, Dict[str, Any]]:
    """
    Load, clean, split and preprocess the configured dataset.

    Args:
        config: Sweep configuration

    Returns:
        Tuple of (train, test, metadata)

    Raises:
        ValueError: If columns are missing, the split is invalid or a split is empty
        FileNotFoundError: If the dataset file doesn't exist
    """
    dataset_config = config.dataset
    raw_df = load_source_dataframe(dataset_config, config.random_state)
    df, cleaning_info = clean_dataframe(raw_df, dataset_config, config.imputation)

    dataset_name = (
        os.path.splitext(os.path.basename(dataset_config.path))[0] if dataset_config.source == "csv" else "smarket"
    )
    dataset = LabeledDataset.from_dataframe(
        df, dataset_config.feature_columns, dataset_config.label_column, name=dataset_name
    )

    train, test, split_parameters = split_dataset(dataset, df, config.split, config.random_state)
    if len(train) == 0:
        raise ValueError("Split produced an empty training set")

    original_n_train = len(train)
    if config.max_samples is not None and len(train) > config.max_samples:
        logger.debug(f"Sampling {config.max_samples} instances from {len(train)} train instances")
        train = subsample_dataset(train, config.max_samples, random_seed=config.random_state)
        samples_subsampled = True
    else:
        samples_subsampled = False

    train, test = _preprocess_pair(train, test, config.preprocessing)

    metadata = {
        "dataset_name": dataset_name,
        "dataset_source": dataset_config.source,
        "dataset_path": dataset_config.path,
        "label_column": dataset_config.label_column,
        "feature_names": list(train.feature_names),
        "n_features": train.n_features,
        # Train/test info
        "n_train": len(train),
        "n_test": len(test),
        "original_n_train": original_n_train,
        "train_subsampled": samples_subsampled,
        "max_samples_used": config.max_samples,
        "train_label_distribution": train.get_label_distribution(),
        "test_label_distribution": test.get_label_distribution(),
        # Split info
        "split_method": split_parameters.split_method.value,
        "test_size": split_parameters.test_size,
        "test_query": config.split.test_query,
        "split_random_seed": split_parameters.random_seed,
        # Preprocessing info
        "preprocessing_enabled": config.preprocessing.enabled,
        "scaler_type": config.preprocessing.scaler_type,
        "clip_quantiles": config.preprocessing.clip_quantiles,
        "log_transform": config.preprocessing.log_transform,
    }
    metadata.update(cleaning_info)

    logger.debug(f"Prepared split: {metadata['n_train']} train / {metadata['n_test']} test instances")
    return train, test, metadata


def _preprocess_pair(
    train: LabeledDataset, test: LabeledDataset, preprocessing_config: PreprocessingConfig
) -> Tuple[LabeledDataset, LabeledDataset]:
    if not preprocessing_config.enabled:
        return train, test

    preprocessor = FitPreprocessor(config=preprocessing_config)
    return preprocessor.fit_transform_pair(train, test)
