#!/usr/bin/env python3
"""
Model Evaluation Script

This script prepares a single train/test split of a labeled tabular dataset
and fits the configured models on it: classifiers (KNN, logistic regression)
evaluated on both splits with a test confusion table, an optional least-squares
regression of a numeric column, and an optional clustering of the training
features compared against the class labels.

Usage:
    python run.py --config path/to/config.yaml [--verbose]

Example config structure:
    dataset:
      source: "smarket"
      feature_columns: ["Lag1", "Lag2"]
      label_column: "Direction"

    split:
      method: "mask"
      test_query: "Year == 2005"

    models:
      - name: "logistic_regression"
        hyperparameters:
          threshold: 0.5
      - name: "knn"
        hyperparameters:
          n_neighbors: 3

    regression:
      target_column: "Today"
      feature_columns: ["Lag1", "Lag2", "Volume"]

    clustering:
      algorithm: "kmeans"
      hyperparameters:
        n_clusters: 2

    output_report_path: "model_evaluation_results.csv"
"""

import argparse
import logging
import sys
import traceback

from tabstat.scripts.knn_sweeps.run import setup_logging
from tabstat.scripts.model_evaluation.config import ModelEvaluationConfig
from tabstat.scripts.model_evaluation.evaluation_executor import EvaluationExecutor
from tabstat.scripts.model_evaluation.report_manager import ReportManager


def run_model_evaluation(config: ModelEvaluationConfig) -> ReportManager:
    """
    Run all configured evaluations and save the CSV report.

    Args:
        config: Validated evaluation configuration

    Returns:
        ReportManager holding all results
    """
    logger = logging.getLogger(__name__)

    executor = EvaluationExecutor(config)
    executor.prepare_data()

    report_manager = ReportManager(config.output_report_path)

    enabled_models = config.get_enabled_models()
    for idx, model_config in enumerate(enabled_models, 1):
        logger.info(
            f"[{idx}/{len(enabled_models)}] Evaluating {model_config.name} with {model_config.hyperparameters}"
        )
        result = executor.run_classification(model_config)
        logger.info(f"  Test misclassification rate: {result['test_metrics']['misclassification_rate']:.4f}")
        report_manager.add_result(result)

    if config.regression is not None and config.regression.enabled:
        logger.info(f"Fitting linear regression of '{config.regression.target_column}'")
        report_manager.add_result(executor.run_regression(config.regression))

    if config.clustering is not None and config.clustering.enabled:
        logger.info(f"Clustering training features with {config.clustering.algorithm}")
        report_manager.add_result(executor.run_clustering(config.clustering))

    report_manager.save_csv_report()
    return report_manager


def main() -> None:
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="Fit and evaluate models on one train/test split",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", required=True, help="Path to YAML configuration file")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        logger.info(f"Loading configuration from: {args.config}")
        config = ModelEvaluationConfig.from_yaml(args.config)
        config.validate()

        report_manager = run_model_evaluation(config)
        report_manager.log_summary()

    except Exception as e:
        logger.error(f"Fatal error: {str(e)}")
        if args.verbose:
            logger.error(f"Traceback: {traceback.format_exc()}")
        sys.exit(1)


if __name__ == "__main__":
    main()
