from abc import ABC, abstractmethod
from typing import Optional
import numpy as np
from pydantic.dataclasses import dataclass
from pydantic import Field


@dataclass
class ClassificationConfig:
    """Base configuration for classification models"""

    random_state: Optional[int] = Field(None, description="Random seed for reproducibility")


class ClassificationModel(ABC):
    """Abstract base class for single-label classification models"""

    def __init__(self, config: ClassificationConfig):
        self.config = config
        self._is_fitted = False
        self._model = None
        self._classes = None

    def _validate_inputs(self, features: np.ndarray, labels: np.ndarray) -> np.ndarray:
        """
        Validate training features and labels

        Args:
            features: Input features of shape (n_samples, n_features)
            labels: Input labels of shape (n_samples,)

        Returns:
            Validated labels array
        """
        labels = np.asarray(labels)

        if features.ndim != 2:
            raise ValueError("Features must be 2D array of shape (n_samples, n_features)")
        if labels.ndim != 1:
            raise ValueError(f"Labels must be 1D array, got {labels.ndim}D")
        if features.shape[0] != labels.shape[0]:
            raise ValueError(f"Features and labels sample count mismatch: {features.shape[0]} vs {labels.shape[0]}")
        if features.shape[0] == 0:
            raise ValueError("Cannot fit on an empty training set")

        self._classes = np.unique(labels)
        return labels

    def _check_fitted(self) -> None:
        if not self._is_fitted:
            raise ValueError("Model must be fitted before making predictions")

    @abstractmethod
    def fit(self, features: np.ndarray, labels: np.ndarray) -> "ClassificationModel":
        """
        Fit the classification model to the features and labels

        Args:
            features: Input features of shape (n_samples, n_features)
            labels: Target labels of shape (n_samples,)

        Returns:
            Self for method chaining
        """
        pass

    @abstractmethod
    def predict(self, features: np.ndarray) -> np.ndarray:
        """
        Predict labels for the features

        Args:
            features: Input features of shape (n_samples, n_features)

        Returns:
            Predicted labels of shape (n_samples,)
        """
        pass

    @abstractmethod
    def predict_proba(self, features: np.ndarray) -> np.ndarray:
        """
        Predict class probabilities for the features

        Args:
            features: Input features of shape (n_samples, n_features)

        Returns:
            Class probabilities of shape (n_samples, n_classes), columns ordered as `classes`
        """
        pass

    def fit_predict(self, features: np.ndarray, labels: np.ndarray) -> np.ndarray:
        """Fit and predict on the training features in one step"""
        return self.fit(features, labels).predict(features)

    def score(self, features: np.ndarray, labels: np.ndarray) -> float:
        """
        Compute accuracy score for the predictions

        Args:
            features: Input features of shape (n_samples, n_features)
            labels: True labels

        Returns:
            Accuracy score
        """
        predictions = self.predict(features)
        return float(np.mean(predictions == np.asarray(labels)))

    @property
    def is_fitted(self) -> bool:
        """Check if the model has been fitted"""
        return self._is_fitted

    @property
    def classes(self) -> Optional[np.ndarray]:
        """Sorted distinct labels seen during fitting"""
        return self._classes

    @property
    def n_classes(self) -> Optional[int]:
        return None if self._classes is None else len(self._classes)

    def get_coefficients(self) -> Optional[np.ndarray]:
        """
        Get fitted coefficients for linear models

        Returns:
            Coefficient array or None if not available
        """
        if hasattr(self._model, "coef_"):
            return self._model.coef_
        return None
