from typing import Any, Dict, List, Union

import pandas as pd


def filter_rows(df: pd.DataFrame, query: str) -> pd.DataFrame:
    """
    Keep rows matching a pandas query expression, e.g. "Age > 50 and BMI > 18.5".

    Args:
        df: Input DataFrame
        query: Expression understood by DataFrame.query

    Returns:
        New DataFrame with matching rows and a fresh index
    """
    try:
        return df.query(query).reset_index(drop=True)
    except Exception as e:
        raise ValueError(f"Invalid filter expression '{query}': {e}") from e


def add_threshold_category(
    df: pd.DataFrame,
    column: str,
    threshold: float,
    new_column: str,
    above_label: str,
    below_label: str,
) -> pd.DataFrame:
    """
    Derive a two-level category from a numeric column, e.g. BMI > 25 -> "overweight".

    Rows where the source column is missing stay missing in the new column.

    Returns:
        New DataFrame with the category column appended
    """
    if column not in df.columns:
        raise ValueError(f"Column not found in DataFrame: {column}. Available: {list(df.columns)}")

    result = df.copy()
    category = pd.Series(below_label, index=df.index, dtype=object)
    category[df[column] > threshold] = above_label
    category[df[column].isna()] = None
    result[new_column] = category
    return result


def group_summary(
    df: pd.DataFrame,
    by: Union[str, List[str]],
    column: str,
    agg: Union[str, List[str]] = "mean",
) -> pd.DataFrame:
    """
    Aggregate a column per group, skipping missing values.

    Args:
        df: Input DataFrame
        by: Grouping column(s)
        column: Column to aggregate
        agg: Aggregation name(s) understood by pandas (mean, median, count, ...)

    Returns:
        DataFrame with one row per group
    """
    group_columns = [by] if isinstance(by, str) else list(by)
    missing_cols = [col for col in group_columns + [column] if col not in df.columns]
    if missing_cols:
        raise ValueError(f"Columns not found in DataFrame: {missing_cols}. Available: {list(df.columns)}")

    summary = df.groupby(group_columns, dropna=True)[column].agg(agg)
    if isinstance(summary, pd.Series):
        summary = summary.rename(f"{agg}_{column}")
    else:
        summary.columns = [f"{name}_{column}" for name in summary.columns]
    return summary.reset_index()


def unique_value_counts(df: pd.DataFrame) -> Dict[str, int]:
    """Number of distinct non-missing values per column."""
    return {str(col): int(count) for col, count in df.nunique(dropna=True).items()}


def describe_columns(df: pd.DataFrame) -> Dict[str, Dict[str, Any]]:
    """
    Short per-column profile: dtype, missing count and distinct values.

    Returns:
        Dictionary mapping column name to its profile
    """
    unique_counts = unique_value_counts(df)
    return {
        str(col): {
            "dtype": str(df[col].dtype),
            "n_missing": int(df[col].isna().sum()),
            "n_unique": unique_counts[str(col)],
        }
        for col in df.columns
    }
