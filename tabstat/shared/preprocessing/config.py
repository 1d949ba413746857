from typing import Any, Dict, Optional, Tuple
from pydantic.dataclasses import dataclass


@dataclass(frozen=True)
class PreprocessingConfig:
    """Configuration for feature preprocessing"""

    enabled: bool = True
    scaler_type: Optional[str] = None
    clip_quantiles: Optional[Tuple[float, float]] = None
    log_transform: Optional[bool] = None

    @classmethod
    def from_dict(cls, config_dict: Optional[Dict[str, Any]]) -> "PreprocessingConfig":
        """
        Build from a YAML `preprocessing:` section.

        A section that does not name a scaler standardizes the features; an explicit
        `scaler_type: null` turns scaling off.
        """
        config_dict = config_dict or {}
        clip_quantiles = config_dict.get("clip_quantiles")
        return cls(
            enabled=config_dict.get("enabled", True),
            scaler_type=config_dict.get("scaler_type", "standard"),
            clip_quantiles=tuple(clip_quantiles) if clip_quantiles is not None else None,
            log_transform=config_dict.get("log_transform", False),
        )


@dataclass(frozen=True)
class ImputationConfig:
    """Configuration for missing-value handling before datasets are built"""

    # Column name -> "mean" | "median" | "mode"
    strategies: Optional[Dict[str, str]] = None
    # Drop rows still containing missing values in the used columns
    drop_remaining: bool = True
