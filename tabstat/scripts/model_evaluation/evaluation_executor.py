"""Core evaluation logic for model evaluation experiments"""

import logging
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from tabstat.datasets.dataset import LabeledDataset
from tabstat.scripts.knn_sweeps.dataset_loader import (
    clean_dataframe,
    compute_split_indices,
    load_source_dataframe,
)
from tabstat.shared.classification import ClassificationEvaluator, ClassificationFactory
from tabstat.shared.clustering import ClusteringEvaluator, ClusteringFactory
from tabstat.shared.preprocessing.config import PreprocessingConfig
from tabstat.shared.preprocessing.fit_preprocessor import FitPreprocessor
from tabstat.shared.regression import LinearRegressionConfig, LinearRegressionModel, RegressionEvaluator
from .config import ClusteringTaskConfig, ModelConfig, ModelEvaluationConfig, RegressionTaskConfig


logger = logging.getLogger(__name__)


class EvaluationExecutor:
    """Prepares one train/test split and fits and evaluates models on it"""

    def __init__(self, config: ModelEvaluationConfig):
        self.config = config
        self.data: Optional[Dict[str, Any]] = None

    def prepare_data(self) -> Dict[str, Any]:
        """
        Load, clean and split the dataset once for all models.

        Returns:
            Dictionary with "train"/"test" classification datasets, optional
            "regression_train"/"regression_test" datasets and "split_method"
        """
        config = self.config
        dataset_config = config.dataset

        extra_columns: List[str] = []
        if config.regression is not None and config.regression.enabled:
            extra_columns = list(config.regression.feature_columns or []) + [config.regression.target_column]

        raw_df = load_source_dataframe(dataset_config, config.random_state)
        df, cleaning_info = clean_dataframe(raw_df, dataset_config, config.imputation, extra_columns=extra_columns)
        logger.info(
            f"Cleaned dataset: {len(df)} rows ({cleaning_info['rows_dropped_missing']} dropped for missing values)"
        )

        dataset = LabeledDataset.from_dataframe(df, dataset_config.feature_columns, dataset_config.label_column)
        train_idxs, test_idxs, split_parameters = compute_split_indices(
            dataset, df, config.split, config.random_state
        )
        if len(train_idxs) == 0 or len(test_idxs) == 0:
            raise ValueError(f"Split produced {len(train_idxs)} train and {len(test_idxs)} test rows")

        train, test = _preprocess_pair(
            dataset.subset(train_idxs, name="train"), dataset.subset(test_idxs, name="test"), config.preprocessing
        )
        data = {
            "train": train,
            "test": test,
            "split_method": split_parameters.split_method.value,
            "n_rows": len(df),
        }

        if config.regression is not None and config.regression.enabled:
            regression_dataset = LabeledDataset.from_dataframe(
                df,
                config.regression.feature_columns or dataset_config.feature_columns,
                config.regression.target_column,
            )
            data["regression_train"], data["regression_test"] = _preprocess_pair(
                regression_dataset.subset(train_idxs, name="train"),
                regression_dataset.subset(test_idxs, name="test"),
                config.preprocessing,
            )

        logger.info(f"Prepared split ({data['split_method']}): {len(train)} train / {len(test)} test rows")
        self.data = data
        return data

    def _require_data(self) -> Dict[str, Any]:
        if self.data is None:
            raise RuntimeError("prepare_data must be called before running evaluations")
        return self.data

    def run_classification(self, model_config: ModelConfig) -> Dict[str, Any]:
        """
        Fit one classification model on the train split and evaluate it on both splits.

        Args:
            model_config: Model name and hyperparameters

        Returns:
            Dictionary with train and test metrics, the test confusion table and metadata
        """
        data = self._require_data()
        train, test = data["train"], data["test"]

        hyperparameters = dict(model_config.hyperparameters)
        hyperparameters.setdefault("random_state", self.config.random_state)

        start_time = time.time()
        try:
            model = ClassificationFactory.create_with_defaults(model_config.name, **hyperparameters)
            model.fit(train.features, train.labels)
            train_predictions = model.predict(train.features)
            test_predictions = model.predict(test.features)
        except Exception as e:
            raise RuntimeError(f"Classification with {model_config.name} failed: {str(e)}") from e
        execution_time = time.time() - start_time

        return {
            "timestamp": datetime.now().isoformat(),
            "task": "classification",
            "model_name": model_config.name,
            "hyperparameters": hyperparameters,
            "n_train": len(train),
            "n_test": len(test),
            "train_metrics": ClassificationEvaluator.evaluate(train.labels, train_predictions),
            "test_metrics": ClassificationEvaluator.evaluate(test.labels, test_predictions),
            "confusion_table": ClassificationEvaluator.confusion_table(test.labels, test_predictions),
            "execution_time": execution_time,
        }

    def run_regression(self, regression_config: RegressionTaskConfig) -> Dict[str, Any]:
        """
        Fit a least-squares regression of the target column on the train split.

        Returns:
            Dictionary with train and test metrics, coefficients and metadata
        """
        data = self._require_data()
        train, test = data["regression_train"], data["regression_test"]

        start_time = time.time()
        model = LinearRegressionModel(LinearRegressionConfig(fit_intercept=regression_config.fit_intercept))
        try:
            model.fit(train.features, train.labels)
            train_metrics = RegressionEvaluator.evaluate(
                train.labels, model.predict(train.features), n_features=train.n_features
            )
        except ValueError as e:
            raise RuntimeError(f"Regression on '{regression_config.target_column}' failed: {str(e)}") from e
        execution_time = time.time() - start_time

        test_metrics = None
        if len(test) >= 2:
            test_metrics = RegressionEvaluator.evaluate(
                test.labels, model.predict(test.features), n_features=test.n_features
            )

        return {
            "timestamp": datetime.now().isoformat(),
            "task": "regression",
            "model_name": "linear_regression",
            "hyperparameters": {"fit_intercept": regression_config.fit_intercept},
            "target_column": regression_config.target_column,
            "n_train": len(train),
            "n_test": len(test),
            "train_metrics": train_metrics,
            "test_metrics": test_metrics,
            "intercept": model.intercept,
            "coefficients": model.get_coefficients(train.feature_names),
            "execution_time": execution_time,
        }

    def run_clustering(self, clustering_config: ClusteringTaskConfig) -> Dict[str, Any]:
        """
        Cluster the training features and compare the clusters with the class labels.

        Returns:
            Dictionary with clustering metrics and metadata
        """
        data = self._require_data()
        train = data["train"]

        hyperparameters = dict(clustering_config.hyperparameters)
        hyperparameters.setdefault("random_state", self.config.random_state)

        start_time = time.time()
        try:
            algorithm = ClusteringFactory.create(clustering_config.algorithm, hyperparameters)
            cluster_labels = algorithm.cluster_dataset(train)
        except Exception as e:
            raise RuntimeError(f"Clustering with {clustering_config.algorithm} failed: {str(e)}") from e
        execution_time = time.time() - start_time

        metrics = ClusteringEvaluator.evaluate(train.features, cluster_labels, true_labels=train.labels)
        return {
            "timestamp": datetime.now().isoformat(),
            "task": "clustering",
            "model_name": clustering_config.algorithm,
            "hyperparameters": hyperparameters,
            "n_train": len(train),
            "n_test": 0,
            "train_metrics": metrics,
            "test_metrics": None,
            "cluster_centers": algorithm.get_cluster_centers(),
            "cluster_label_table": algorithm.crosstab_with_labels(cluster_labels, train.labels),
            "execution_time": execution_time,
        }


def _preprocess_pair(train: LabeledDataset, test: LabeledDataset, preprocessing_config: PreprocessingConfig):
    if not preprocessing_config.enabled:
        return train, test
    return FitPreprocessor(config=preprocessing_config).fit_transform_pair(train, test)
