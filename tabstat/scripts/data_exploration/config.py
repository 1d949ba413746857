import os
from typing import Dict, List, Optional

import yaml
from pydantic.dataclasses import dataclass

from tabstat.shared.preprocessing.imputation import IMPUTATION_STRATEGIES


@dataclass(frozen=True)
class CategoryConfig:
    """Two-level category derived from a numeric column"""

    column: str
    threshold: float
    new_column: str
    above_label: str
    below_label: str


@dataclass(frozen=True)
class GroupSummaryConfig:
    """Aggregation of one column per group"""

    by: List[str]
    column: str
    agg: str = "mean"


@dataclass(frozen=True)
class Config:
    """Configuration for cleaning and exploring a tabular dataset."""

    input_file: str
    output_file: str
    na_values: Optional[List[str]] = None
    # Columns to keep, in order; all columns if None
    columns: Optional[List[str]] = None
    # Pandas query expression selecting the rows to keep
    row_filter: Optional[str] = None
    categories: Optional[List[CategoryConfig]] = None
    # Column name -> "mean" | "median" | "mode"
    imputation: Optional[Dict[str, str]] = None
    # Drop rows still containing missing values after imputation
    drop_missing: bool = False
    group_summaries: Optional[List[GroupSummaryConfig]] = None
    summary_output_file: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not os.path.exists(self.input_file):
            raise ValueError(f"Input file does not exist: {self.input_file}")

        for output_file in (self.output_file, self.summary_output_file):
            if output_file is None:
                continue
            output_dir = os.path.dirname(output_file)
            if output_dir and not os.path.exists(output_dir):
                raise ValueError(f"Output directory does not exist: {output_dir}")

        for column, strategy in (self.imputation or {}).items():
            if strategy not in IMPUTATION_STRATEGIES:
                raise ValueError(
                    f"Unknown imputation strategy '{strategy}' for column '{column}'. "
                    f"Available: {list(IMPUTATION_STRATEGIES)}"
                )

        if self.group_summaries and not self.summary_output_file:
            raise ValueError("group_summaries require a summary_output_file")

    @classmethod
    def from_yaml(cls, config_file: str) -> "Config":
        """Load configuration from YAML file."""
        if not os.path.exists(config_file):
            raise ValueError(f"Config file does not exist: {config_file}")

        with open(config_file, "r") as f:
            config_dict = yaml.safe_load(f) or {}

        required_fields = ["input_file", "output_file"]
        for field in required_fields:
            if field not in config_dict:
                raise ValueError(f"Missing required field '{field}' in config file")

        # Convert relative paths to absolute paths
        paths = {}
        for key in ("input_file", "output_file", "summary_output_file"):
            path = config_dict.get(key)
            paths[key] = os.path.abspath(path) if path and not os.path.isabs(path) else path

        group_summaries = None
        if config_dict.get("group_summaries"):
            group_summaries = []
            for summary_dict in config_dict["group_summaries"]:
                summary_dict = dict(summary_dict)
                if isinstance(summary_dict.get("by"), str):
                    summary_dict["by"] = [summary_dict["by"]]
                group_summaries.append(GroupSummaryConfig(**summary_dict))

        return cls(
            input_file=paths["input_file"],
            output_file=paths["output_file"],
            na_values=config_dict.get("na_values"),
            columns=config_dict.get("columns"),
            row_filter=config_dict.get("row_filter"),
            categories=[CategoryConfig(**category) for category in config_dict.get("categories") or []] or None,
            imputation=config_dict.get("imputation"),
            drop_missing=config_dict.get("drop_missing", False),
            group_summaries=group_summaries,
            summary_output_file=paths["summary_output_file"],
        )
