"""Missing-value reporting and imputation for pandas DataFrames.

All functions return new DataFrames; the input frame is never modified.
"""

import logging
from typing import Any, Dict, List, Optional

import pandas as pd


logger = logging.getLogger(__name__)

IMPUTATION_STRATEGIES = ("mean", "median", "mode")


def missing_value_summary(df: pd.DataFrame) -> Dict[str, Any]:
    """
    Count missing values per column and in total.

    Args:
        df: Input DataFrame

    Returns:
        Dictionary with "total_missing", "rows_with_missing" and "per_column" (column -> count)
    """
    per_column = df.isna().sum()
    return {
        "total_missing": int(per_column.sum()),
        "rows_with_missing": int(df.isna().any(axis=1).sum()),
        "per_column": {str(col): int(count) for col, count in per_column.items()},
    }


def drop_missing(df: pd.DataFrame, columns: Optional[List[str]] = None) -> pd.DataFrame:
    """
    Drop rows with missing values.

    Args:
        df: Input DataFrame
        columns: Only consider these columns; all columns if None

    Returns:
        New DataFrame without rows containing missing values, with a fresh index
    """
    result = df.dropna(subset=columns).reset_index(drop=True)
    logger.debug(f"Dropped {len(df) - len(result)} rows with missing values")
    return result


def compute_fill_value(series: pd.Series, strategy: str) -> Any:
    """
    Compute the value used to fill missing entries of a column.

    Args:
        series: Column values, missing entries are ignored
        strategy: One of "mean", "median", "mode"

    Returns:
        Fill value

    Raises:
        ValueError: If the strategy is unknown, the column has no observed values,
            or mean/median is requested for a non-numeric column
    """
    if strategy not in IMPUTATION_STRATEGIES:
        raise ValueError(f"Unknown imputation strategy: {strategy}. Available: {list(IMPUTATION_STRATEGIES)}")

    observed = series.dropna()
    if observed.empty:
        raise ValueError(f"Column '{series.name}' has no observed values to impute from")

    if strategy == "mode":
        # Ties resolve to the smallest value, as returned first by pandas
        return observed.mode().iloc[0]

    if not pd.api.types.is_numeric_dtype(observed):
        raise ValueError(f"Strategy '{strategy}' requires a numeric column, '{series.name}' has dtype {series.dtype}")

    if strategy == "mean":
        return float(observed.mean())
    return float(observed.median())


def impute_column(df: pd.DataFrame, column: str, strategy: str) -> pd.DataFrame:
    """
    Fill missing values of one column with its mean, median or mode.

    Args:
        df: Input DataFrame
        column: Column to impute
        strategy: One of "mean", "median", "mode"

    Returns:
        New DataFrame with the column imputed
    """
    if column not in df.columns:
        raise ValueError(f"Column not found in DataFrame: {column}. Available: {list(df.columns)}")

    n_missing = int(df[column].isna().sum())
    result = df.copy()
    if n_missing == 0:
        return result

    fill_value = compute_fill_value(df[column], strategy)
    result[column] = result[column].fillna(fill_value)
    logger.debug(f"Imputed {n_missing} missing values in '{column}' with {strategy}={fill_value}")
    return result


def impute_missing(df: pd.DataFrame, strategies: Dict[str, str]) -> pd.DataFrame:
    """
    Impute several columns, each with its own strategy.

    Args:
        df: Input DataFrame
        strategies: Mapping of column name to strategy

    Returns:
        New DataFrame with all listed columns imputed
    """
    result = df
    for column, strategy in strategies.items():
        result = impute_column(result, column, strategy)
    if result is df:
        result = df.copy()
    return result

