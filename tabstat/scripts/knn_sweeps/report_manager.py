import csv
import json
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from tabstat.shared.sweeps.result import SweepResult
from tabstat.shared.utils.numpy_helpers import to_json_string


class SweepReportManager:
    """Manages the CSV report of KNN sweeps, one row per candidate neighborhood size"""

    def __init__(self, report_path: str):
        """
        Initialize report manager.

        Args:
            report_path: Path to CSV report file
        """
        self.report_path = report_path
        self._ensure_report_directory()

    def _ensure_report_directory(self) -> None:
        report_dir = os.path.dirname(self.report_path)
        if report_dir and not os.path.exists(report_dir):
            os.makedirs(report_dir)

    def append_sweep_result(
        self,
        sweep_result: SweepResult,
        dataset_metadata: Dict[str, Any],
        config_hash: str,
        execution_time: float,
        config_version: str = "1.0",
    ) -> int:
        """
        Append all points of a sweep to the CSV report.

        Args:
            sweep_result: Completed (or partial) sweep result
            dataset_metadata: Metadata from dataset loading
            config_hash: Hash of the configuration that produced the sweep
            execution_time: Duration of the sweep in seconds
            config_version: Configuration version for tracking

        Returns:
            Number of rows written
        """
        file_exists = os.path.exists(self.report_path)
        best_k = sweep_result.best()[0] if len(sweep_result) > 0 else None
        run_id = f"{config_hash}_{datetime.now().strftime('%Y%m%d%H%M%S%f')}"

        rows = []
        for _, point in sweep_result.to_dataframe(hyperparameter="k").iterrows():
            row = self._create_base_row(dataset_metadata, config_hash, config_version, run_id)
            row.update(
                {
                    "k": int(point["k"]),
                    "mean_misclassification_rate": point["mean_misclassification_rate"],
                    "std_misclassification_rate": point["std_misclassification_rate"],
                    "n_trials": int(point["n_trials"]),
                    "is_best": int(point["k"]) == best_k,
                    "random_state": sweep_result.random_state,
                    "execution_time": execution_time,
                }
            )
            rows.append(row)

        with open(self.report_path, "a", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=self._get_column_names())
            if not file_exists:
                writer.writeheader()
            writer.writerows(rows)

        return len(rows)

    def _create_base_row(
        self, dataset_metadata: Dict[str, Any], config_hash: str, config_version: str, run_id: str
    ) -> Dict[str, Any]:
        """Columns shared by all rows of one sweep"""
        return {
            "timestamp": datetime.now().isoformat(),
            "run_id": run_id,
            "config_version": config_version,
            "config_hash": config_hash,
            "dataset_name": dataset_metadata.get("dataset_name"),
            "dataset_path": dataset_metadata.get("dataset_path") or "",
            "label_column": dataset_metadata.get("label_column"),
            "feature_names": json.dumps(dataset_metadata.get("feature_names", [])),
            "n_features": dataset_metadata.get("n_features"),
            "n_train": dataset_metadata.get("n_train"),
            "n_test": dataset_metadata.get("n_test"),
            "split_method": dataset_metadata.get("split_method"),
            "test_query": dataset_metadata.get("test_query") or "",
            "train_label_distribution": to_json_string(dataset_metadata.get("train_label_distribution", {})),
            "test_label_distribution": to_json_string(dataset_metadata.get("test_label_distribution", {})),
            "preprocessing_enabled": dataset_metadata.get("preprocessing_enabled"),
            "scaler_type": dataset_metadata.get("scaler_type"),
            "clip_quantiles": (
                to_json_string(dataset_metadata["clip_quantiles"]) if dataset_metadata.get("clip_quantiles") else ""
            ),
            "log_transform": dataset_metadata.get("log_transform"),
        }

    def _get_column_names(self) -> List[str]:
        base_columns = ["timestamp", "run_id", "config_version", "config_hash"]

        dataset_columns = [
            "dataset_name",
            "dataset_path",
            "label_column",
            "feature_names",
            "n_features",
            "n_train",
            "n_test",
            "split_method",
            "test_query",
            "train_label_distribution",
            "test_label_distribution",
            "preprocessing_enabled",
            "scaler_type",
            "clip_quantiles",
            "log_transform",
        ]

        sweep_columns = [
            "k",
            "mean_misclassification_rate",
            "std_misclassification_rate",
            "n_trials",
            "is_best",
            "random_state",
        ]

        return base_columns + dataset_columns + sweep_columns + ["execution_time"]

    def load_results_dataframe(self) -> Optional[pd.DataFrame]:
        """
        Load the complete report as a pandas DataFrame.

        Returns:
            DataFrame with all rows, or None if the report doesn't exist
        """
        if not os.path.exists(self.report_path):
            return None

        try:
            return pd.read_csv(self.report_path, dtype={"run_id": str, "config_hash": str})
        except Exception as e:
            raise ValueError(f"Failed to load results: {str(e)}") from e

    def get_report_summary(self) -> Dict[str, Any]:
        """Summary statistics of the current report"""
        df = self.load_results_dataframe()
        if df is None or len(df) == 0:
            return {"total_runs": 0, "total_rows": 0, "config_hashes": [], "best_k_per_run": {}}

        best_rows = df[df["is_best"].astype(bool)]
        return {
            "total_runs": int(df["run_id"].nunique()),
            "total_rows": len(df),
            "config_hashes": df["config_hash"].astype(str).unique().tolist(),
            "best_k_per_run": {str(row["run_id"]): int(row["k"]) for _, row in best_rows.iterrows()},
        }
