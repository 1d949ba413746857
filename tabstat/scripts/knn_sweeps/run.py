#!/usr/bin/env python3
"""
KNN Neighborhood-Size Sweep Script

This script loads a labeled tabular dataset, splits it into train and test
sets and estimates the test misclassification rate of a KNN classifier for
every candidate neighborhood size k. Each candidate is evaluated with several
independent fit/predict trials and the rates are averaged.

Usage:
    python run.py --config path/to/config.yaml [--verbose] [--time-limit SECONDS]

Example config structure:
    dataset:
      source: "smarket"            # or "csv" with a path
      feature_columns: ["Lag1", "Lag2"]
      label_column: "Direction"

    split:
      method: "mask"               # "random", "stratified" or "mask"
      test_query: "Year == 2005"

    imputation:
      strategies:
        Lag1: "mean"
      drop_remaining: true

    preprocessing:
      enabled: false

    sweep:
      k_min: 1
      k_max: 20
      trials_per_candidate: 100

    output_report_path: "knn_sweep_results.csv"
    random_state: 42
    n_jobs: 4

Output CSV columns:
    - Run info: timestamp, run_id, config_version, config_hash
    - Dataset info: dataset_name, n_train, n_test, split_method, label distributions, etc.
    - Sweep info: k, mean_misclassification_rate, std_misclassification_rate, n_trials, is_best
"""

import argparse
import logging
import sys
import threading
import time
import traceback
from typing import Optional

from tabstat.scripts.knn_sweeps.config import KNNSweepConfig
from tabstat.scripts.knn_sweeps.dataset_loader import load_and_preprocess_split, validate_dataset_source
from tabstat.scripts.knn_sweeps.report_manager import SweepReportManager
from tabstat.shared.classification.sweep_adapter import make_knn_classify_fn
from tabstat.shared.sweeps import HyperparameterSweepEvaluator, SweepCancelled


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    format_str = "%(asctime)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def run_knn_sweep(config: KNNSweepConfig, time_limit: Optional[float] = None) -> dict:
    """
    Execute one configured sweep and append it to the report.

    Args:
        config: Validated sweep configuration
        time_limit: Optional number of seconds after which remaining trials are cancelled

    Returns:
        Dictionary with the sweep result, dataset metadata, execution time and a cancelled flag
    """
    logger = logging.getLogger(__name__)

    validate_dataset_source(config.dataset)
    train, test, dataset_metadata = load_and_preprocess_split(config)

    dataset_info = (
        f"{dataset_metadata['n_train']} train / {dataset_metadata['n_test']} test instances, "
        f"{dataset_metadata['n_features']} features"
    )
    if dataset_metadata["train_subsampled"]:
        dataset_info += f" (sampled from {dataset_metadata['original_n_train']} train instances)"
    logger.info(f"Loaded dataset: {dataset_info}")

    candidates = config.sweep.get_candidates()
    logger.info(
        f"Sweeping k over {candidates[0]}..{candidates[-1]} ({len(candidates)} candidates), "
        f"{config.sweep.trials_per_candidate} trials each"
    )

    evaluator = HyperparameterSweepEvaluator(random_state=config.random_state, n_jobs=config.n_jobs, show_progress=True)
    cancel_event = threading.Event()
    timer = None
    if time_limit is not None:
        timer = threading.Timer(time_limit, cancel_event.set)
        timer.daemon = True
        timer.start()

    cancelled = False
    start_time = time.time()
    try:
        sweep_result = evaluator.sweep(
            train,
            test,
            candidates,
            config.sweep.trials_per_candidate,
            make_knn_classify_fn(),
            cancel_event=cancel_event,
        )
    except SweepCancelled as e:
        logger.warning(f"Time limit of {time_limit}s reached, keeping {len(e.partial_result)} finished candidates")
        sweep_result = e.partial_result
        cancelled = True
    finally:
        if timer is not None:
            timer.cancel()
    execution_time = time.time() - start_time

    report_manager = SweepReportManager(config.output_report_path)
    n_rows = report_manager.append_sweep_result(
        sweep_result,
        dataset_metadata,
        config_hash=config.get_config_hash(),
        execution_time=execution_time,
        config_version=config.config_version,
    )
    logger.info(f"Wrote {n_rows} rows to {config.output_report_path}")

    return {
        "sweep_result": sweep_result,
        "dataset_metadata": dataset_metadata,
        "execution_time": execution_time,
        "cancelled": cancelled,
    }


def main() -> None:
    """Main execution function"""
    parser = argparse.ArgumentParser(
        description="Run a KNN neighborhood-size sweep on a labeled tabular dataset",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", required=True, help="Path to YAML configuration file")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument(
        "--time-limit", type=float, default=None, help="Cancel remaining trials after this many seconds"
    )

    args = parser.parse_args()

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        logger.info(f"Loading configuration from: {args.config}")
        config = KNNSweepConfig.from_yaml(args.config)
        config.validate()
        logger.info("Configuration loaded and validated successfully")

        outcome = run_knn_sweep(config, time_limit=args.time_limit)
        sweep_result = outcome["sweep_result"]

        logger.info("=" * 60)
        logger.info("KNN SWEEP CANCELLED" if outcome["cancelled"] else "KNN SWEEP COMPLETED")
        logger.info("=" * 60)
        for k, mean_rate in sweep_result:
            logger.info(f"  k={k:>3}: mean misclassification rate {mean_rate:.4f}")

        if len(sweep_result) > 0:
            best_k, best_rate = sweep_result.best()
            logger.info(f"Best k: {best_k} (mean misclassification rate {best_rate:.4f})")
        logger.info(f"Execution time: {outcome['execution_time']:.2f}s")
        logger.info(f"Results saved to: {config.output_report_path}")

    except Exception as e:
        logger.error(f"Fatal error: {str(e)}")
        if args.verbose:
            logger.error(f"Traceback: {traceback.format_exc()}")
        sys.exit(1)


if __name__ == "__main__":
    main()
