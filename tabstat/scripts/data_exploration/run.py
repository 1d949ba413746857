#!/usr/bin/env python3
"""
Data Exploration Script

Cleans a tabular CSV dataset and logs a short exploration of it. The steps run
in a fixed order, each one optional:
1. Load the CSV file, treating configured strings (e.g. "NA") as missing
2. Keep only the configured columns
3. Keep only rows matching a pandas query (e.g. "Age >= 20")
4. Derive two-level categories from numeric columns (e.g. BMI > 25 -> "overweight")
5. Report missing values per column
6. Impute missing values per column (mean, median or mode)
7. Drop rows that still contain missing values
8. Compute group summaries (e.g. mean BMI per Gender)
9. Report the number of distinct values per column

Example config:
    input_file: "nhanes.csv"
    output_file: "nhanes_clean.csv"
    na_values: ["NA"]
    columns: ["Gender", "Age", "Race1", "Education", "BMI", "Pulse"]
    row_filter: "Age >= 20"
    categories:
      - column: "BMI"
        threshold: 25
        new_column: "BMI_category"
        above_label: "overweight"
        below_label: "normal"
    imputation:
      BMI: "mean"
      Pulse: "median"
    drop_missing: true
    group_summaries:
      - by: "Gender"
        column: "BMI"
        agg: "mean"
    summary_output_file: "nhanes_group_summaries.csv"
"""

import logging
import sys
from typing import Any, Dict, List

import click
import pandas as pd

from tabstat.datasets.loading import load_csv
from tabstat.scripts.data_exploration.config import Config
from tabstat.shared.preprocessing.exploration import (
    add_threshold_category,
    describe_columns,
    filter_rows,
    group_summary,
    unique_value_counts,
)
from tabstat.shared.preprocessing.imputation import drop_missing, impute_missing, missing_value_summary


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the script."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S")


def clean_dataset(config: Config) -> Dict[str, Any]:
    """
    Apply the configured cleaning steps.

    Args:
        config: Configuration object

    Returns:
        Dictionary with the cleaned DataFrame ("data"), the group summaries
        ("group_summaries") and per-step statistics ("steps")
    """
    df = load_csv(config.input_file, na_values=config.na_values, columns=config.columns)
    steps: List[Dict[str, Any]] = [{"step": "load", "rows": len(df), "columns": len(df.columns)}]
    logging.info(f"Loaded {len(df)} rows and {len(df.columns)} columns from {config.input_file}")

    if config.row_filter:
        df = filter_rows(df, config.row_filter)
        steps.append({"step": "filter", "rows": len(df), "columns": len(df.columns)})
        logging.info(f"Filter '{config.row_filter}' kept {len(df)} rows")

    for category in config.categories or []:
        df = add_threshold_category(
            df,
            category.column,
            category.threshold,
            category.new_column,
            category.above_label,
            category.below_label,
        )
        counts = df[category.new_column].value_counts(dropna=True).to_dict()
        logging.info(f"Category '{category.new_column}' from {category.column} > {category.threshold}: {counts}")
    if config.categories:
        steps.append({"step": "categories", "rows": len(df), "columns": len(df.columns)})

    missing = missing_value_summary(df)
    logging.info(f"Missing values: {missing['total_missing']} total in {missing['rows_with_missing']} rows")
    for column, count in missing["per_column"].items():
        if count > 0:
            logging.info(f"  {column}: {count}")

    if config.imputation:
        df = impute_missing(df, config.imputation)
        steps.append({"step": "impute", "rows": len(df), "columns": len(df.columns)})
        logging.info(f"Imputed columns: {sorted(config.imputation)}")

    if config.drop_missing:
        n_rows = len(df)
        df = drop_missing(df)
        steps.append({"step": "drop_missing", "rows": len(df), "columns": len(df.columns)})
        logging.info(f"Dropped {n_rows - len(df)} rows with remaining missing values")

    summaries = []
    for summary_config in config.group_summaries or []:
        summary = group_summary(df, summary_config.by, summary_config.column, summary_config.agg)
        summaries.append(summary)
        logging.info(f"{summary_config.agg} of {summary_config.column} by {summary_config.by}:")
        for line in summary.to_string(index=False).splitlines():
            logging.info(f"  {line}")

    for column, profile in describe_columns(df).items():
        logging.debug(f"{column}: {profile}")
    logging.info(f"Distinct values per column: {unique_value_counts(df)}")

    return {"data": df, "group_summaries": summaries, "steps": steps}


def save_outputs(result: Dict[str, Any], config: Config) -> None:
    """
    Save the cleaned data and the group summaries to CSV files.

    Args:
        result: Output of clean_dataset
        config: Configuration object
    """
    logging.info(f"Saving cleaned data to: {config.output_file}")
    result["data"].to_csv(config.output_file, index=False)

    if result["group_summaries"] and config.summary_output_file:
        combined = pd.concat(result["group_summaries"], ignore_index=True, sort=False)
        combined.to_csv(config.summary_output_file, index=False)
        logging.info(f"Saved {len(result['group_summaries'])} group summaries to: {config.summary_output_file}")


@click.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    required=True,
    help="Path to YAML configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def main(config: str, verbose: bool):
    """
    Clean a tabular CSV dataset and log a short exploration of it.

    Examples:

        python run.py --config config.yaml

        python run.py --config config.yaml --verbose
    """
    setup_logging(verbose)

    try:
        logging.info(f"Loading configuration from: {config}")
        config_obj = Config.from_yaml(config)

        result = clean_dataset(config_obj)
        save_outputs(result, config_obj)

        logging.info(f"Data exploration completed: {len(result['data'])} rows written")

    except Exception as e:
        logging.error(f"Script failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
