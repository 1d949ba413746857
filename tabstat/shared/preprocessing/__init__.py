"""Preprocessing utilities for cleaning and scaling tabular data"""

from .config import PreprocessingConfig, ImputationConfig
from .fit_preprocessor import FitPreprocessor
from .imputation import (
    IMPUTATION_STRATEGIES,
    missing_value_summary,
    drop_missing,
    compute_fill_value,
    impute_column,
    impute_missing,
)
from .exploration import filter_rows, add_threshold_category, group_summary, unique_value_counts, describe_columns

__all__ = [
    "PreprocessingConfig",
    "ImputationConfig",
    "FitPreprocessor",
    "IMPUTATION_STRATEGIES",
    "missing_value_summary",
    "drop_missing",
    "compute_fill_value",
    "impute_column",
    "impute_missing",
    "filter_rows",
    "add_threshold_category",
    "group_summary",
    "unique_value_counts",
    "describe_columns",
]
