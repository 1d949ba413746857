import warnings
from typing import Any, Dict, Optional, Tuple

import numpy as np
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.exceptions import NotFittedError
from sklearn.preprocessing import MinMaxScaler, RobustScaler, StandardScaler

from tabstat.datasets.dataset import LabeledDataset
from tabstat.shared.preprocessing.config import PreprocessingConfig

SCALERS = {
    "standard": StandardScaler,
    "minmax": MinMaxScaler,
    "robust": RobustScaler,
}


class FitPreprocessor(BaseEstimator, TransformerMixin):
    """
    Feature transformation learned on training data only.

    The steps run in a fixed order: quantile clipping, log transform, scaling.
    Clip bounds and scaler statistics come from the rows passed to `fit`, so a
    test set is transformed with exactly the parameters of its training set.
    """

    def __init__(self, config: PreprocessingConfig, log_offset: float = 1e-6):
        """
        Args:
            config: Which steps to apply
            log_offset: Added before the log so zeros stay finite
        """
        self.config = config
        self.log_offset = log_offset
        self._check_config()

        self._is_fitted = False
        self._clip_bounds: Optional[Tuple[np.ndarray, np.ndarray]] = None
        self._scaler = None

    def _check_config(self) -> None:
        if self.log_offset <= 0:
            raise ValueError("Log offset must be positive")
        if not self.config.enabled:
            return

        if self.config.clip_quantiles:
            lower, upper = self.config.clip_quantiles
            if not 0 <= lower < upper <= 1:
                raise ValueError(f"Quantiles must satisfy 0 <= lower < upper <= 1, got {self.config.clip_quantiles}")
        if self.config.scaler_type is not None and self.config.scaler_type not in SCALERS:
            raise ValueError(f"Unknown scaler type: {self.config.scaler_type}. Available: {list(SCALERS)}")

    @staticmethod
    def _as_float_matrix(X: np.ndarray) -> np.ndarray:
        X = np.asarray(X)
        if not np.issubdtype(X.dtype, np.number):
            raise ValueError(f"Non-numeric array provided (dtype {X.dtype}), all features must be numeric")
        if X.ndim != 2:
            raise ValueError(f"Features must be 2D array of shape (n_samples, n_features), got {X.ndim}D")
        return X.astype(float)

    def _clip(self, X: np.ndarray) -> np.ndarray:
        if self._clip_bounds is None:
            return X
        return np.clip(X, *self._clip_bounds)

    def _log(self, X: np.ndarray) -> np.ndarray:
        if not self.config.log_transform:
            return X
        if np.any(X < 0):
            warnings.warn(f"Negative feature values are floored at {self.log_offset} before the log transform")
        return np.log(np.maximum(X + self.log_offset, self.log_offset))

    def fit(self, X: np.ndarray, y=None) -> "FitPreprocessor":
        """
        Learn clip bounds and scaler statistics from training features.

        Args:
            X: Training features of shape (n_samples, n_features)
            y: Ignored

        Returns:
            self
        """
        X = self._as_float_matrix(X)
        self._clip_bounds = None
        self._scaler = None

        if self.config.enabled:
            if self.config.clip_quantiles is not None:
                lower_q, upper_q = self.config.clip_quantiles
                self._clip_bounds = (
                    np.percentile(X, lower_q * 100, axis=0),
                    np.percentile(X, upper_q * 100, axis=0),
                )
            if self.config.scaler_type is not None:
                # The scaler sees clipped and log-transformed values, as transform will
                self._scaler = SCALERS[self.config.scaler_type]().fit(self._log(self._clip(X)))

        self._is_fitted = True
        return self

    def transform(self, X: np.ndarray) -> np.ndarray:
        """Apply the learned steps; returns a new array"""
        if not self._is_fitted:
            raise NotFittedError("FitPreprocessor is not fitted yet, call 'fit' first")
        X = self._as_float_matrix(X)

        if not self.config.enabled or X.shape[0] == 0:
            return X

        X = self._log(self._clip(X))
        if self._scaler is not None:
            X = self._scaler.transform(X)
        return X

    def fit_transform_pair(
        self, train: LabeledDataset, test: LabeledDataset
    ) -> Tuple[LabeledDataset, LabeledDataset]:
        """
        Fit on the train dataset and transform both datasets.

        Returns:
            New (train, test) datasets with transformed features and unchanged labels
        """
        self.fit(train.features)
        return train.with_features(self.transform(train.features)), test.with_features(self.transform(test.features))

    def get_transformation_info(self) -> Dict[str, Any]:
        """Configured steps and, once fitted, the learned clip bounds"""
        info = {
            "preprocessing_enabled": self.config.enabled,
            "clipping_enabled": self.config.clip_quantiles is not None,
            "clip_quantiles": self.config.clip_quantiles,
            "log_transform": self.config.log_transform,
            "log_offset": self.log_offset if self.config.log_transform else None,
            "scaler_type": self.config.scaler_type,
            "is_fitted": self._is_fitted,
        }
        if self._clip_bounds is not None:
            info["fitted_clip_bounds"] = {
                "lower_bounds": self._clip_bounds[0],
                "upper_bounds": self._clip_bounds[1],
            }
        return info
