"""Evaluation metrics for classification models"""

from typing import Dict, List, Optional, Union
import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score,
    precision_score,
    recall_score,
    f1_score,
    confusion_matrix,
    classification_report as sklearn_classification_report,
)


class ClassificationEvaluator:
    """Stateless classification evaluation class for single-label classification"""

    @staticmethod
    def get_metric_names() -> List[str]:
        """
        Get the names of all metrics that are computed by evaluate

        Returns:
            List of metric names
        """
        return [
            "accuracy",
            "misclassification_rate",
            "macro_precision",
            "macro_recall",
            "macro_f1",
            "micro_precision",
            "micro_recall",
            "micro_f1",
            "weighted_precision",
            "weighted_recall",
            "weighted_f1",
        ]

    @staticmethod
    def misclassification_rate(y_true: np.ndarray, y_pred: np.ndarray) -> float:
        """
        Fraction of instances whose predicted label differs from the true label

        Args:
            y_true: True labels of shape (n_samples,)
            y_pred: Predicted labels of shape (n_samples,)

        Returns:
            Misclassification rate in [0, 1]

        Raises:
            ValueError: If shapes differ or arrays are empty
        """
        y_true = np.asarray(y_true)
        y_pred = np.asarray(y_pred)

        if y_true.shape != y_pred.shape:
            raise ValueError(f"Shape mismatch: y_true {y_true.shape} vs y_pred {y_pred.shape}")
        if y_true.size == 0:
            raise ValueError("Misclassification rate is undefined for empty label arrays")

        return float(np.mean(y_true != y_pred))

    @staticmethod
    def evaluate(
        y_true: np.ndarray,
        y_pred: np.ndarray,
        compute_per_class_metrics: bool = False,
    ) -> Dict[str, Union[float, Dict]]:
        """
        Compute accuracy, misclassification rate and averaged precision/recall/F1

        Args:
            y_true: True labels
            y_pred: Predicted labels
            compute_per_class_metrics: If True, compute metrics for each class individually

        Returns:
            Dictionary containing the metrics and optionally per-class metrics
        """
        y_true = np.asarray(y_true)
        y_pred = np.asarray(y_pred)

        metrics = {
            "accuracy": float(accuracy_score(y_true, y_pred)),
            "misclassification_rate": ClassificationEvaluator.misclassification_rate(y_true, y_pred),
            "macro_precision": ClassificationEvaluator._compute_macro_metric_with_support(
                y_true, y_pred, precision_score
            ),
            "macro_recall": ClassificationEvaluator._compute_macro_metric_with_support(y_true, y_pred, recall_score),
            "macro_f1": ClassificationEvaluator._compute_macro_metric_with_support(y_true, y_pred, f1_score),
            "micro_precision": float(precision_score(y_true, y_pred, average="micro", zero_division=0)),
            "micro_recall": float(recall_score(y_true, y_pred, average="micro", zero_division=0)),
            "micro_f1": float(f1_score(y_true, y_pred, average="micro", zero_division=0)),
            "weighted_precision": float(precision_score(y_true, y_pred, average="weighted", zero_division=0)),
            "weighted_recall": float(recall_score(y_true, y_pred, average="weighted", zero_division=0)),
            "weighted_f1": float(f1_score(y_true, y_pred, average="weighted", zero_division=0)),
        }

        if compute_per_class_metrics:
            per_class_metrics = {}
            for label in np.unique(y_true):
                y_true_binary = (y_true == label).astype(int)
                y_pred_binary = (y_pred == label).astype(int)

                per_class_metrics[str(label)] = {
                    "precision": float(precision_score(y_true_binary, y_pred_binary, zero_division=0)),
                    "recall": float(recall_score(y_true_binary, y_pred_binary, zero_division=0)),
                    "f1": float(f1_score(y_true_binary, y_pred_binary, zero_division=0)),
                    "support": int(np.sum(y_true == label)),
                }

            metrics["per_class"] = per_class_metrics

        return metrics

    @staticmethod
    def confusion_table(
        y_true: np.ndarray, y_pred: np.ndarray, labels: Optional[List] = None
    ) -> pd.DataFrame:
        """
        Confusion matrix as a labelled table: rows are predictions, columns are true labels

        Args:
            y_true: True labels
            y_pred: Predicted labels
            labels: Label order; defaults to the sorted union of true and predicted labels

        Returns:
            DataFrame of counts indexed by predicted label with true labels as columns
        """
        y_true = np.asarray(y_true)
        y_pred = np.asarray(y_pred)
        if labels is None:
            labels = np.unique(np.concatenate([y_true, y_pred])).tolist()

        # sklearn puts true labels on rows; transpose to the predicted-by-true layout of table(pred, truth)
        matrix = confusion_matrix(y_true, y_pred, labels=labels).T
        return pd.DataFrame(
            matrix,
            index=pd.Index(labels, name="predicted"),
            columns=pd.Index(labels, name="true"),
        )

    @staticmethod
    def classification_report(
        y_true: np.ndarray,
        y_pred: np.ndarray,
        output_dict: bool = True,
    ) -> Union[str, Dict]:
        """
        Generate a classification report using sklearn

        Args:
            y_true: True labels
            y_pred: Predicted labels
            output_dict: If True, return as dict; if False, return as string

        Returns:
            Classification report (dict or string)
        """
        return sklearn_classification_report(y_true, y_pred, output_dict=output_dict, zero_division=0)

    @staticmethod
    def _compute_macro_metric_with_support(y_true: np.ndarray, y_pred: np.ndarray, metric_func, **kwargs) -> float:
        """
        Compute macro-averaged metric considering only classes with support > 0

        Args:
            y_true: True labels
            y_pred: Predicted labels
            metric_func: Metric function (precision_score, recall_score, f1_score)
            **kwargs: Additional arguments for metric function

        Returns:
            Macro-averaged metric excluding classes absent from y_true
        """
        scores = []
        for label in np.unique(y_true):
            y_true_binary = (y_true == label).astype(int)
            y_pred_binary = (y_pred == label).astype(int)
            scores.append(metric_func(y_true_binary, y_pred_binary, zero_division=0, **kwargs))
        return float(np.mean(scores)) if scores else 0.0
