import logging
import os
from typing import List, Optional

import numpy as np
import pandas as pd


logger = logging.getLogger(__name__)

# Daily percentage returns of the synthetic market, roughly matching the S&P 500 over 2001-2005
SMARKET_RETURN_MEAN = 0.0038
SMARKET_RETURN_STD = 1.136
SMARKET_START_YEAR = 2001
SMARKET_TRADING_DAYS_PER_YEAR = 250


def load_csv(
    path: str,
    na_values: Optional[List[str]] = None,
    columns: Optional[List[str]] = None,
) -> pd.DataFrame:
    """
    Load a tabular dataset from a CSV file.

    Args:
        path: Path to the CSV file
        na_values: Additional strings to recognize as missing values (e.g. "NA", "?")
        columns: If given, only these columns are kept, in this order

    Returns:
        Loaded DataFrame

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If requested columns are missing
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Dataset file not found: {path}")

    df = pd.read_csv(path, na_values=na_values)
    logger.debug(f"Loaded {len(df)} rows and {len(df.columns)} columns from {path}")

    if columns is not None:
        missing_cols = [col for col in columns if col not in df.columns]
        if missing_cols:
            raise ValueError(f"Columns not found in {path}: {missing_cols}. Available: {list(df.columns)}")
        df = df[columns].copy()

    return df


def generate_smarket(n_days: int = 1250, random_state: Optional[int] = 42) -> pd.DataFrame:
    """
    Generate a synthetic stock market dataset shaped like ISLR's Smarket.

    Each row is one trading day with the returns of the five previous days
    (Lag1..Lag5), the traded volume, the return of the day (Today) and its
    direction ("Up" if Today > 0, else "Down"). Years start at 2001 with
    250 trading days each.

    Args:
        n_days: Number of trading days to generate
        random_state: Random state for reproducible generation

    Returns:
        DataFrame with columns Year, Lag1..Lag5, Volume, Today, Direction
    """
    if n_days < 1:
        raise ValueError("n_days must be at least 1")

    rng = np.random.default_rng(random_state)

    # Five extra leading days seed the lag columns of the first rows
    returns = rng.normal(SMARKET_RETURN_MEAN, SMARKET_RETURN_STD, size=n_days + 5)
    today = returns[5:]

    df = pd.DataFrame({"Year": SMARKET_START_YEAR + np.arange(n_days) // SMARKET_TRADING_DAYS_PER_YEAR})
    for lag in range(1, 6):
        df[f"Lag{lag}"] = np.round(returns[5 - lag : 5 - lag + n_days], 3)

    df["Volume"] = np.round(rng.lognormal(mean=0.35, sigma=0.25, size=n_days), 4)
    df["Today"] = np.round(today, 3)
    df["Direction"] = np.where(df["Today"] > 0, "Up", "Down")

    return df
