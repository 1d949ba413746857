"""Report management for model evaluation results"""

import logging
import os
from typing import Any, Dict, List, Optional

import pandas as pd

from tabstat.shared.classification.evaluation import ClassificationEvaluator
from tabstat.shared.utils.numpy_helpers import convert_to_primitives_nested, to_json_string


logger = logging.getLogger(__name__)

REGRESSION_METRICS = ["r2", "adjusted_r2", "rmse", "mae"]
CLUSTERING_METRICS = [
    "n_clusters",
    "silhouette_score",
    "calinski_harabasz_score",
    "davies_bouldin_score",
    "adjusted_rand_score",
]


class ReportManager:
    """Collects evaluation results and writes them as a CSV report, one row per model and split"""

    def __init__(self, report_path: str):
        self.report_path = report_path
        self.results: List[Dict[str, Any]] = []

    def add_result(self, result: Dict[str, Any]) -> None:
        """Add a single evaluation result"""
        self.results.append(result)

    @staticmethod
    def get_metric_columns() -> List[str]:
        return ClassificationEvaluator.get_metric_names() + REGRESSION_METRICS + CLUSTERING_METRICS

    def build_dataframe(self) -> pd.DataFrame:
        """All results as a DataFrame with one row per (model, split)"""
        rows = []
        for result in self.results:
            for split_name in ("train", "test"):
                metrics = result.get(f"{split_name}_metrics")
                if metrics is None:
                    continue

                row = {
                    "timestamp": result["timestamp"],
                    "task": result["task"],
                    "model_name": result["model_name"],
                    "hyperparameters": to_json_string(result["hyperparameters"]),
                    "split": split_name,
                    "n_samples": result[f"n_{split_name}"],
                    "target_column": result.get("target_column", ""),
                    "coefficients": to_json_string(result["coefficients"]) if result.get("coefficients") else "",
                    "execution_time": result["execution_time"],
                }
                row.update(self._flatten_metrics(metrics))
                rows.append(row)

        base_columns = [
            "timestamp",
            "task",
            "model_name",
            "hyperparameters",
            "split",
            "n_samples",
            "target_column",
            "coefficients",
        ]
        return pd.DataFrame(rows, columns=base_columns + self.get_metric_columns() + ["execution_time"])

    def _flatten_metrics(self, metrics: Dict[str, Any]) -> Dict[str, Optional[float]]:
        """Keep the scalar report metrics, missing ones become None"""
        metrics = convert_to_primitives_nested(metrics)
        return {column: metrics.get(column) for column in self.get_metric_columns()}

    def save_csv_report(self) -> Optional[str]:
        """
        Save all results to the CSV report.

        Returns:
            Report path, or None if there were no results
        """
        if not self.results:
            logger.warning("No results to save")
            return None

        df = self.build_dataframe()

        report_dir = os.path.dirname(self.report_path)
        if report_dir:
            os.makedirs(report_dir, exist_ok=True)

        df.to_csv(self.report_path, index=False)
        logger.info(f"Saved CSV report to: {self.report_path}")
        return self.report_path

    def log_summary(self) -> None:
        """Log the key metrics and confusion tables of all results"""
        if not self.results:
            logger.info("No results to summarize")
            return

        logger.info("=" * 60)
        logger.info("MODEL EVALUATION SUMMARY")
        logger.info("=" * 60)

        for result in self.results:
            logger.info(f"{result['task']}: {result['model_name']} {to_json_string(result['hyperparameters'])}")
            test_metrics = result.get("test_metrics")

            if result["task"] == "classification":
                logger.info(f"  Train accuracy: {result['train_metrics']['accuracy']:.4f}")
                logger.info(f"  Test accuracy: {test_metrics['accuracy']:.4f}")
                logger.info(f"  Test misclassification rate: {test_metrics['misclassification_rate']:.4f}")
                logger.info("  Test confusion table (rows: predicted, columns: true):")
                for line in result["confusion_table"].to_string().splitlines():
                    logger.info(f"    {line}")
            elif result["task"] == "regression":
                logger.info(f"  Train R^2: {result['train_metrics']['r2']:.4f}")
                if test_metrics is not None:
                    logger.info(f"  Test RMSE: {test_metrics['rmse']:.4f}")
                logger.info(f"  Coefficients: {to_json_string(result['coefficients'])}")
            else:
                metrics = result["train_metrics"]
                logger.info(f"  Cluster sizes: {metrics['cluster_sizes']}")
                if metrics.get("adjusted_rand_score") is not None:
                    logger.info(f"  Adjusted Rand index vs labels: {metrics['adjusted_rand_score']:.4f}")
                logger.info("  Instances per cluster (rows) and label (columns):")
                for line in result["cluster_label_table"].to_string().splitlines():
                    logger.info(f"    {line}")

            logger.info("-" * 60)

        logger.info(f"Total evaluations: {len(self.results)}")
