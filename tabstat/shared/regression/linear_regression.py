from typing import Dict, Optional, Sequence
import numpy as np
from pydantic.dataclasses import dataclass
from pydantic import Field
from sklearn.linear_model import LinearRegression


@dataclass
class LinearRegressionConfig:
    """Configuration for ordinary least squares regression"""

    fit_intercept: bool = Field(True, description="Whether to estimate an intercept")


class LinearRegressionModel:
    """Ordinary least squares linear regression"""

    def __init__(self, config: LinearRegressionConfig):
        self.config = config
        self._model = None
        self._is_fitted = False

    def fit(self, features: np.ndarray, targets: np.ndarray) -> "LinearRegressionModel":
        """
        Fit the regression to the features and targets

        Args:
            features: Input features of shape (n_samples, n_features)
            targets: Numeric targets of shape (n_samples,)

        Returns:
            Self for method chaining
        """
        features = np.asarray(features, dtype=float)
        targets = np.asarray(targets, dtype=float)

        if features.ndim != 2:
            raise ValueError("Features must be 2D array of shape (n_samples, n_features)")
        if targets.ndim != 1 or targets.shape[0] != features.shape[0]:
            raise ValueError(f"Targets must be 1D with {features.shape[0]} values, got shape {targets.shape}")
        if features.shape[0] <= features.shape[1] + int(self.config.fit_intercept):
            raise ValueError(
                f"Need more samples than parameters: {features.shape[0]} samples, "
                f"{features.shape[1] + int(self.config.fit_intercept)} parameters"
            )

        self._model = LinearRegression(fit_intercept=self.config.fit_intercept)
        self._model.fit(features, targets)
        self._is_fitted = True
        return self

    def predict(self, features: np.ndarray) -> np.ndarray:
        if not self._is_fitted:
            raise ValueError("Model must be fitted before making predictions")
        return self._model.predict(np.asarray(features, dtype=float))

    @property
    def is_fitted(self) -> bool:
        return self._is_fitted

    @property
    def intercept(self) -> Optional[float]:
        return float(self._model.intercept_) if self._is_fitted else None

    def get_coefficients(self, feature_names: Optional[Sequence[str]] = None) -> Optional[Dict[str, float]]:
        """
        Fitted slope per feature

        Args:
            feature_names: Names for the coefficients, defaults to feature_0..feature_{n-1}

        Returns:
            Mapping of feature name to coefficient, or None before fitting
        """
        if not self._is_fitted:
            return None

        coefficients = np.atleast_1d(self._model.coef_)
        if feature_names is None:
            feature_names = [f"feature_{i}" for i in range(len(coefficients))]
        return {str(name): float(value) for name, value in zip(feature_names, coefficients)}
