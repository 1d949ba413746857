from typing import Dict, Iterator, List, Optional, Tuple

import pandas as pd
from pydantic.dataclasses import dataclass


@dataclass(frozen=True)
class SweepResult:
    """
    Mean misclassification rate per candidate hyperparameter value.

    `points` keeps the caller's candidate order; `trial_rates` holds the
    individual trial rates each mean was computed from.
    """

    points: Tuple[Tuple[int, float], ...]
    trial_rates: Dict[int, Tuple[float, ...]]
    trials_per_candidate: int
    random_state: Optional[int] = None

    def __iter__(self) -> Iterator[Tuple[int, float]]:
        return iter(self.points)

    def __len__(self) -> int:
        return len(self.points)

    def as_list(self) -> List[Tuple[int, float]]:
        """Ordered (candidate, mean_misclassification_rate) pairs."""
        return list(self.points)

    @property
    def candidates(self) -> List[int]:
        return [candidate for candidate, _ in self.points]

    @property
    def mean_rates(self) -> List[float]:
        return [rate for _, rate in self.points]

    def best(self) -> Tuple[int, float]:
        """
        Candidate with the lowest mean misclassification rate.

        Ties resolve to the candidate listed first.

        Raises:
            ValueError: If the result is empty
        """
        if not self.points:
            raise ValueError("Sweep result is empty")
        return min(self.points, key=lambda point: point[1])

    def to_dataframe(self, hyperparameter: str = "k") -> pd.DataFrame:
        """One row per candidate with its mean, standard deviation and trial count."""
        rows = []
        for candidate, mean_rate in self.points:
            rates = self.trial_rates.get(candidate, ())
            rows.append(
                {
                    hyperparameter: candidate,
                    "mean_misclassification_rate": mean_rate,
                    "std_misclassification_rate": float(pd.Series(rates).std(ddof=0)) if rates else None,
                    "n_trials": len(rates),
                }
            )
        return pd.DataFrame(
            rows, columns=[hyperparameter, "mean_misclassification_rate", "std_misclassification_rate", "n_trials"]
        )
