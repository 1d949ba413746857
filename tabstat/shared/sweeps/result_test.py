import dataclasses

import pytest

from tabstat.shared.sweeps.result import SweepResult


def make_result():
    return SweepResult(
        points=((1, 0.3), (3, 0.2), (5, 0.2)),
        trial_rates={1: (0.2, 0.4), 3: (0.2, 0.2), 5: (0.1, 0.3)},
        trials_per_candidate=2,
        random_state=0,
    )


class TestSweepResult:
    def test_iteration_and_length(self):
        result = make_result()
        assert list(result) == [(1, 0.3), (3, 0.2), (5, 0.2)]
        assert len(result) == 3

    def test_candidates_and_rates(self):
        result = make_result()
        assert result.candidates == [1, 3, 5]
        assert result.mean_rates == [0.3, 0.2, 0.2]

    def test_best_prefers_first_on_ties(self):
        assert make_result().best() == (3, 0.2)

    def test_best_on_empty_result(self):
        result = SweepResult(points=(), trial_rates={}, trials_per_candidate=1)
        with pytest.raises(ValueError):
            result.best()

    def test_to_dataframe(self):
        df = make_result().to_dataframe()
        assert list(df.columns) == ["k", "mean_misclassification_rate", "std_misclassification_rate", "n_trials"]
        assert df["k"].tolist() == [1, 3, 5]
        assert df["n_trials"].tolist() == [2, 2, 2]
        assert df["std_misclassification_rate"].tolist() == pytest.approx([0.1, 0.0, 0.1])

    def test_to_dataframe_custom_hyperparameter_name(self):
        df = make_result().to_dataframe(hyperparameter="n_neighbors")
        assert df.columns[0] == "n_neighbors"

    def test_frozen(self):
        result = make_result()
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.trials_per_candidate = 5
