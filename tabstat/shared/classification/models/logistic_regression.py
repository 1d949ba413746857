from typing import Optional
import numpy as np
from pydantic.dataclasses import dataclass
from pydantic import Field
from sklearn.linear_model import LogisticRegression

from ..base import ClassificationModel, ClassificationConfig


@dataclass
class LogisticRegressionConfig(ClassificationConfig):
    """Configuration for logistic regression classifier"""

    C: float = Field(1e6, description="Inverse regularization strength; large values approximate an unpenalized fit")
    fit_intercept: bool = Field(True, description="Whether to estimate an intercept")
    max_iter: int = Field(1000, description="Maximum solver iterations")
    solver: str = Field("lbfgs", description="Optimization algorithm")
    threshold: Optional[float] = Field(
        None, description="Decision threshold on the positive-class probability (binary problems only)"
    )


class LogisticRegressionModel(ClassificationModel):
    """Logistic regression for binary problems and multinomial logistic regression for more than two classes"""

    def __init__(self, config: LogisticRegressionConfig):
        super().__init__(config)
        self.config: LogisticRegressionConfig = config

    def fit(self, features: np.ndarray, labels: np.ndarray) -> "LogisticRegressionModel":
        """
        Fit the logistic regression model to the features and labels

        Args:
            features: Input features of shape (n_samples, n_features)
            labels: Target labels of shape (n_samples,)

        Returns:
            Self for method chaining
        """
        features = np.asarray(features, dtype=float)
        labels = self._validate_inputs(features, labels)

        if len(self._classes) < 2:
            raise ValueError(f"Logistic regression needs at least 2 classes, got {len(self._classes)}")
        if self.config.threshold is not None:
            if len(self._classes) != 2:
                raise ValueError("A decision threshold is only supported for binary classification")
            if not 0 < self.config.threshold < 1:
                raise ValueError(f"Threshold must be in (0, 1), got {self.config.threshold}")

        # lbfgs fits a multinomial model for more than two classes
        self._model = LogisticRegression(
            C=self.config.C,
            fit_intercept=self.config.fit_intercept,
            max_iter=self.config.max_iter,
            solver=self.config.solver,
            random_state=self.config.random_state,
        )
        self._model.fit(features, labels)
        self._is_fitted = True

        return self

    def predict(self, features: np.ndarray) -> np.ndarray:
        """
        Predict labels for the features

        For binary problems with a configured threshold, the second (sorted)
        class is predicted when its probability exceeds the threshold.

        Args:
            features: Input features of shape (n_samples, n_features)

        Returns:
            Predicted labels of shape (n_samples,)
        """
        self._check_fitted()

        if self.config.threshold is None:
            return self._model.predict(features)

        positive_proba = self._model.predict_proba(features)[:, 1]
        return np.where(positive_proba > self.config.threshold, self._classes[1], self._classes[0])

    def predict_proba(self, features: np.ndarray) -> np.ndarray:
        """
        Predict class probabilities for the features

        Args:
            features: Input features of shape (n_samples, n_features)

        Returns:
            Class probabilities of shape (n_samples, n_classes)
        """
        self._check_fitted()
        return self._model.predict_proba(features)

    def get_intercept(self) -> Optional[np.ndarray]:
        """Fitted intercept(s), or None before fitting"""
        if not self._is_fitted:
            return None
        return self._model.intercept_
