"""Evaluation metrics for regression models"""

from typing import Dict, Optional
import numpy as np
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score


class RegressionEvaluator:
    """Stateless regression evaluation class"""

    @staticmethod
    def evaluate(y_true: np.ndarray, y_pred: np.ndarray, n_features: Optional[int] = None) -> Dict[str, Optional[float]]:
        """
        Compute goodness-of-fit metrics

        Args:
            y_true: Observed targets
            y_pred: Predicted targets
            n_features: Number of predictors, needed for adjusted R-squared

        Returns:
            Dictionary with r2, adjusted_r2 (None if undefined), rmse, mae and n_samples
        """
        y_true = np.asarray(y_true, dtype=float)
        y_pred = np.asarray(y_pred, dtype=float)

        if y_true.shape != y_pred.shape:
            raise ValueError(f"Shape mismatch: y_true {y_true.shape} vs y_pred {y_pred.shape}")
        n_samples = y_true.shape[0]
        if n_samples < 2:
            raise ValueError("At least 2 samples are required to evaluate a regression")

        r2 = float(r2_score(y_true, y_pred))

        adjusted_r2 = None
        if n_features is not None and n_samples - n_features - 1 > 0:
            adjusted_r2 = 1.0 - (1.0 - r2) * (n_samples - 1) / (n_samples - n_features - 1)

        return {
            "r2": r2,
            "adjusted_r2": adjusted_r2,
            "rmse": float(np.sqrt(mean_squared_error(y_true, y_pred))),
            "mae": float(mean_absolute_error(y_true, y_pred)),
            "n_samples": n_samples,
        }
