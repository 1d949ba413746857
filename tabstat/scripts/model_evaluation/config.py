import os
from typing import Any, Dict, List, Optional
import yaml
from pydantic.dataclasses import dataclass

from tabstat.scripts.knn_sweeps.config import DatasetSourceConfig, SplitConfig
from tabstat.shared.classification.factory import ClassificationFactory
from tabstat.shared.clustering.factory import ClusteringFactory
from tabstat.shared.preprocessing.config import PreprocessingConfig, ImputationConfig


@dataclass(frozen=True)
class ModelConfig:
    """Configuration for a classification model"""

    name: str  # "knn", "logistic_regression", etc.
    hyperparameters: Optional[Dict[str, Any]] = None
    enabled: bool = True

    def __post_init__(self):
        if self.hyperparameters is None:
            object.__setattr__(self, "hyperparameters", {})


@dataclass(frozen=True)
class RegressionTaskConfig:
    """Least-squares fit of a numeric target column"""

    target_column: str
    # Defaults to the dataset feature columns
    feature_columns: Optional[List[str]] = None
    fit_intercept: bool = True
    enabled: bool = True


@dataclass(frozen=True)
class ClusteringTaskConfig:
    """Clustering of the training features, compared against the class labels"""

    algorithm: str = "kmeans"
    hyperparameters: Optional[Dict[str, Any]] = None
    enabled: bool = True

    def __post_init__(self):
        if self.hyperparameters is None:
            object.__setattr__(self, "hyperparameters", {})


@dataclass(frozen=True)
class ModelEvaluationConfig:
    """Configuration for fitting and evaluating models on one train/test split"""

    dataset: DatasetSourceConfig
    models: List[ModelConfig]
    split: Optional[SplitConfig] = None
    imputation: Optional[ImputationConfig] = None
    preprocessing: Optional[PreprocessingConfig] = None
    regression: Optional[RegressionTaskConfig] = None
    clustering: Optional[ClusteringTaskConfig] = None

    # Output configuration
    output_report_path: str = "model_evaluation_results.csv"

    # Execution settings
    random_state: int = 42

    def __post_init__(self):
        if self.split is None:
            object.__setattr__(self, "split", SplitConfig())
        if self.imputation is None:
            object.__setattr__(self, "imputation", ImputationConfig())
        if self.preprocessing is None:
            object.__setattr__(self, "preprocessing", PreprocessingConfig(enabled=False))

    @classmethod
    def from_yaml(cls, config_file: str) -> "ModelEvaluationConfig":
        """Load configuration from YAML file"""
        if not os.path.exists(config_file):
            raise ValueError(f"Config file does not exist: {config_file}")

        with open(config_file, "r") as f:
            config_dict = yaml.safe_load(f) or {}

        return cls.from_dict(config_dict)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "ModelEvaluationConfig":
        """Build configuration from a parsed YAML mapping"""
        if "dataset" not in config_dict:
            raise ValueError("Missing required section 'dataset' in config")

        # Convert relative paths to absolute
        dataset_dict = dict(config_dict["dataset"])
        if dataset_dict.get("path") and not os.path.isabs(dataset_dict["path"]):
            dataset_dict["path"] = os.path.abspath(dataset_dict["path"])

        models = []
        for model_dict in config_dict.get("models", []):
            models.append(
                ModelConfig(
                    name=model_dict["name"],
                    hyperparameters=model_dict.get("hyperparameters", {}),
                    enabled=model_dict.get("enabled", True),
                )
            )

        # Without a preprocessing section the features are used as loaded
        preprocessing = PreprocessingConfig(enabled=False)
        if "preprocessing" in config_dict:
            preprocessing = PreprocessingConfig.from_dict(config_dict["preprocessing"])

        regression = None
        if config_dict.get("regression"):
            regression = RegressionTaskConfig(**config_dict["regression"])

        clustering = None
        if config_dict.get("clustering"):
            clustering = ClusteringTaskConfig(**config_dict["clustering"])

        output_report_path = config_dict.get("output_report_path", "model_evaluation_results.csv")
        if not os.path.isabs(output_report_path):
            output_report_path = os.path.abspath(output_report_path)

        return cls(
            dataset=DatasetSourceConfig(**dataset_dict),
            models=models,
            split=SplitConfig(**config_dict.get("split", {})),
            imputation=ImputationConfig(**config_dict.get("imputation", {})),
            preprocessing=preprocessing,
            regression=regression,
            clustering=clustering,
            output_report_path=output_report_path,
            random_state=config_dict.get("random_state", 42),
        )

    def get_enabled_models(self) -> List[ModelConfig]:
        """Get only enabled models"""
        return [model for model in self.models if model.enabled]

    def validate(self) -> None:
        """Validate configuration"""
        self.dataset.validate()
        self.split.validate()

        available_models = ClassificationFactory.get_available_models()
        for model in self.models:
            if model.name.lower() not in available_models:
                raise ValueError(f"Unknown model: {model.name}. Available: {list(available_models)}")

        if self.clustering is not None and self.clustering.enabled:
            available_algorithms = ClusteringFactory.get_available_algorithms()
            if self.clustering.algorithm.lower() not in available_algorithms:
                raise ValueError(
                    f"Unknown clustering algorithm: {self.clustering.algorithm}. "
                    f"Available: {list(available_algorithms)}"
                )

        regression_enabled = self.regression is not None and self.regression.enabled
        clustering_enabled = self.clustering is not None and self.clustering.enabled
        if not self.get_enabled_models() and not regression_enabled and not clustering_enabled:
            raise ValueError("No models are enabled")

        output_dir = os.path.dirname(self.output_report_path)
        if output_dir and not os.path.exists(output_dir):
            raise ValueError(f"Output directory does not exist: {output_dir}")
