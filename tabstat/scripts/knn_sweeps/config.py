import os
import hashlib
from typing import Dict, List, Optional, Any
import yaml
from pydantic.dataclasses import dataclass

from tabstat.datasets.split import SplitMethod
from tabstat.shared.preprocessing.config import PreprocessingConfig, ImputationConfig
from tabstat.shared.preprocessing.imputation import IMPUTATION_STRATEGIES

DATASET_SOURCES = ("csv", "smarket")


@dataclass(frozen=True)
class DatasetSourceConfig:
    """Where the labeled dataset comes from and which columns it uses"""

    feature_columns: List[str]
    label_column: str
    source: str = "csv"
    path: Optional[str] = None
    na_values: Optional[List[str]] = None
    smarket_days: int = 1250

    def validate(self) -> None:
        if self.source not in DATASET_SOURCES:
            raise ValueError(f"Unknown dataset source: {self.source}. Available: {list(DATASET_SOURCES)}")
        if self.source == "csv":
            if not self.path:
                raise ValueError("A CSV dataset source requires a path")
            if not os.path.exists(self.path):
                raise ValueError(f"Dataset file does not exist: {self.path}")
        if not self.feature_columns:
            raise ValueError("No feature columns configured")
        if self.label_column in self.feature_columns:
            raise ValueError(f"Label column '{self.label_column}' is also listed as a feature")


@dataclass(frozen=True)
class SplitConfig:
    """How the dataset is divided into train and test sets"""

    method: str = "random"
    test_size: float = 0.25
    # Pandas query selecting test rows, used with method "mask", e.g. "Year == 2005"
    test_query: Optional[str] = None

    @property
    def split_method(self) -> SplitMethod:
        return SplitMethod(self.method)

    def validate(self) -> None:
        try:
            split_method = self.split_method
        except ValueError:
            raise ValueError(
                f"Unknown split method: {self.method}. Available: {[method.value for method in SplitMethod]}"
            ) from None
        if split_method == SplitMethod.MASK and not self.test_query:
            raise ValueError("Split method 'mask' requires a test_query")
        if split_method != SplitMethod.MASK and not 0 < self.test_size < 1:
            raise ValueError(f"test_size must be in (0, 1), got {self.test_size}")


@dataclass(frozen=True)
class SweepRangeConfig:
    """Candidate neighborhood sizes and repetitions"""

    candidates: Optional[List[int]] = None
    k_min: int = 1
    k_max: int = 20
    trials_per_candidate: int = 100

    def get_candidates(self) -> List[int]:
        """Explicit candidates if given, otherwise k_min..k_max inclusive"""
        if self.candidates:
            return list(self.candidates)
        return list(range(self.k_min, self.k_max + 1))

    def validate(self) -> None:
        if not self.candidates and self.k_min > self.k_max:
            raise ValueError(f"k_min ({self.k_min}) must not exceed k_max ({self.k_max})")
        if self.trials_per_candidate < 1:
            raise ValueError("trials_per_candidate must be a positive integer")


@dataclass(frozen=True)
class KNNSweepConfig:
    """Configuration for KNN neighborhood-size sweeps"""

    dataset: DatasetSourceConfig
    split: Optional[SplitConfig] = None
    imputation: Optional[ImputationConfig] = None
    preprocessing: Optional[PreprocessingConfig] = None
    sweep: Optional[SweepRangeConfig] = None

    # Output configuration
    output_report_path: str = "knn_sweep_results.csv"

    # Execution settings
    random_state: int = 42
    n_jobs: int = 1
    max_samples: Optional[int] = None  # Maximum number of training instances

    config_version: str = "1.0"

    def __post_init__(self):
        if self.split is None:
            object.__setattr__(self, "split", SplitConfig())
        if self.imputation is None:
            object.__setattr__(self, "imputation", ImputationConfig())
        if self.preprocessing is None:
            object.__setattr__(self, "preprocessing", PreprocessingConfig(enabled=False))
        if self.sweep is None:
            object.__setattr__(self, "sweep", SweepRangeConfig())

    @classmethod
    def from_yaml(cls, config_file: str) -> "KNNSweepConfig":
        """Load configuration from YAML file"""
        if not os.path.exists(config_file):
            raise ValueError(f"Config file does not exist: {config_file}")

        with open(config_file, "r") as f:
            config_dict = yaml.safe_load(f) or {}

        return cls.from_dict(config_dict)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "KNNSweepConfig":
        """Build configuration from a parsed YAML mapping"""
        if "dataset" not in config_dict:
            raise ValueError("Missing required section 'dataset' in config")

        dataset_dict = dict(config_dict["dataset"])
        if dataset_dict.get("path") and not os.path.isabs(dataset_dict["path"]):
            dataset_dict["path"] = os.path.abspath(dataset_dict["path"])

        preprocessing = PreprocessingConfig.from_dict(config_dict.get("preprocessing"))

        output_report_path = config_dict.get("output_report_path", "knn_sweep_results.csv")
        if not os.path.isabs(output_report_path):
            output_report_path = os.path.abspath(output_report_path)

        return cls(
            dataset=DatasetSourceConfig(**dataset_dict),
            split=SplitConfig(**config_dict.get("split", {})),
            imputation=ImputationConfig(**config_dict.get("imputation", {})),
            preprocessing=preprocessing,
            sweep=SweepRangeConfig(**config_dict.get("sweep", {})),
            output_report_path=output_report_path,
            random_state=config_dict.get("random_state", 42),
            n_jobs=config_dict.get("n_jobs", 1),
            max_samples=config_dict.get("max_samples"),
            config_version=config_dict.get("config_version", "1.0"),
        )

    def validate(self) -> None:
        """Validate configuration"""
        self.dataset.validate()
        self.split.validate()
        self.sweep.validate()

        for column, strategy in (self.imputation.strategies or {}).items():
            if strategy not in IMPUTATION_STRATEGIES:
                raise ValueError(
                    f"Unknown imputation strategy '{strategy}' for column '{column}'. "
                    f"Available: {list(IMPUTATION_STRATEGIES)}"
                )

        output_dir = os.path.dirname(self.output_report_path)
        if output_dir and not os.path.exists(output_dir):
            raise ValueError(f"Output directory does not exist: {output_dir}")

        if self.n_jobs < 1:
            raise ValueError("n_jobs must be a positive integer")

        if self.max_samples is not None:
            if not isinstance(self.max_samples, int) or self.max_samples <= 0:
                raise ValueError("max_samples must be a positive integer")

    def get_config_hash(self) -> str:
        """Generate a hash of the configuration for tracking which settings produced a report row"""
        config_str = f"{self.config_version}_{self.dataset}_{self.split}_{self.imputation}_{self.preprocessing}"
        return hashlib.md5(config_str.encode()).hexdigest()[:8]
