import threading

import numpy as np
import pytest

from tabstat.datasets.dataset import LabeledDataset
from tabstat.shared.classification.sweep_adapter import make_knn_classify_fn
from tabstat.shared.sweeps import (
    EmptyTestSet,
    HyperparameterSweepEvaluator,
    InvalidInput,
    SweepCancelled,
    SweepResult,
    sweep,
)


@pytest.fixture
def train_set():
    features = np.array([[0.0, 0.0], [0.1, 0.0], [5.0, 5.0], [5.1, 5.0]])
    return LabeledDataset(features, np.array(["A", "A", "B", "B"]), name="train")


@pytest.fixture
def test_set():
    features = np.array([[0.05, 0.0], [5.05, 5.0]])
    return LabeledDataset(features, np.array(["A", "B"]), name="test")


def exact_match(train, test, k):
    return np.array(test.labels)


def always_a(train, test, k):
    return np.array(["A"] * len(test))


def always_wrong(train, test, k):
    return np.where(test.labels == "A", "B", "A")


class TestSweepScenarios:
    def test_exact_match_classifier(self, train_set, test_set):
        result = sweep(train_set, test_set, [1, 3], 5, exact_match)
        assert result.as_list() == [(1, 0.0), (3, 0.0)]

    def test_constant_classifier(self, train_set, test_set):
        result = sweep(train_set, test_set, [1, 3], 5, always_a)
        assert result.as_list() == [(1, 0.5), (3, 0.5)]

    def test_always_wrong_classifier(self, train_set, test_set):
        result = sweep(train_set, test_set, [2, 1, 4], 3, always_wrong)
        assert result.as_list() == [(2, 1.0), (1, 1.0), (4, 1.0)]

    def test_empty_candidates(self, train_set, test_set):
        with pytest.raises(InvalidInput):
            sweep(train_set, test_set, [], 5, exact_match)

    def test_empty_test_set(self, train_set):
        empty_test = LabeledDataset(np.empty((0, 2)), np.array([], dtype=str))
        with pytest.raises(EmptyTestSet):
            sweep(train_set, empty_test, [1, 3], 5, exact_match)


class TestSweepContract:
    def test_order_follows_candidates(self, train_set, test_set):
        result = sweep(train_set, test_set, [3, 1, 2], 2, exact_match)
        assert result.candidates == [3, 1, 2]

    def test_call_count(self, train_set, test_set):
        calls = []

        def counting(train, test, k):
            calls.append(k)
            return np.array(test.labels)

        sweep(train_set, test_set, [1, 2, 3], 4, counting)
        assert len(calls) == 12
        assert sorted(set(calls)) == [1, 2, 3]

    def test_rates_are_averaged_per_candidate(self, train_set, test_set):
        # Alternates between all-correct and half-wrong predictions
        state = {"calls": 0}

        def alternating(train, test, k):
            state["calls"] += 1
            if state["calls"] % 2:
                return np.array(test.labels)
            return np.array(["A", "A"])

        result = sweep(train_set, test_set, [1], 4, alternating)
        assert result.as_list() == [(1, 0.25)]
        assert result.trial_rates[1] == (0.0, 0.5, 0.0, 0.5)

    def test_rates_within_unit_interval(self, train_set, test_set):
        rng = np.random.default_rng(0)

        def random_labels(train, test, k):
            return rng.choice(["A", "B"], size=len(test))

        result = sweep(train_set, test_set, [1, 2, 3], 10, random_labels)
        assert all(0.0 <= rate <= 1.0 for _, rate in result)

    def test_inputs_not_mutated(self, train_set, test_set):
        train_features = train_set.features.copy()
        test_labels = test_set.labels.copy()

        sweep(train_set, test_set, [1, 3], 3, make_knn_classify_fn(), random_state=0)

        np.testing.assert_array_equal(train_set.features, train_features)
        np.testing.assert_array_equal(test_set.labels, test_labels)

    def test_classify_fn_errors_propagate(self, train_set, test_set):
        def failing(train, test, k):
            raise KeyError("classifier broke")

        with pytest.raises(KeyError, match="classifier broke"):
            sweep(train_set, test_set, [1], 2, failing)

    def test_classify_fn_errors_propagate_from_workers(self, train_set, test_set):
        def failing(train, test, k):
            raise KeyError("classifier broke")

        with pytest.raises(KeyError, match="classifier broke"):
            sweep(train_set, test_set, [1, 2], 2, failing, n_jobs=2)

    def test_returns_sweep_result(self, train_set, test_set):
        result = sweep(train_set, test_set, [1], 1, exact_match)
        assert isinstance(result, SweepResult)
        assert result.trials_per_candidate == 1


class TestSweepValidation:
    def test_feature_dimension_mismatch(self, train_set):
        wide_test = LabeledDataset(np.zeros((2, 3)), np.array(["A", "B"]))
        with pytest.raises(InvalidInput, match="Feature count mismatch"):
            sweep(train_set, wide_test, [1], 1, exact_match)

    @pytest.mark.parametrize("candidates", [[0], [-1, 2], [1, 1], [1.5], [True]])
    def test_invalid_candidates(self, train_set, test_set, candidates):
        with pytest.raises(InvalidInput):
            sweep(train_set, test_set, candidates, 1, exact_match)

    @pytest.mark.parametrize("trials", [0, -3, 2.5])
    def test_invalid_trials(self, train_set, test_set, trials):
        with pytest.raises(InvalidInput):
            sweep(train_set, test_set, [1], trials, exact_match)

    def test_non_callable_classify_fn(self, train_set, test_set):
        with pytest.raises(InvalidInput):
            sweep(train_set, test_set, [1], 1, "knn")

    def test_wrong_prediction_count(self, train_set, test_set):
        with pytest.raises(InvalidInput, match="predictions of shape"):
            sweep(train_set, test_set, [1], 1, lambda train, test, k: np.array(["A"]))

    def test_invalid_input_takes_precedence_over_empty_test(self, train_set):
        empty_test = LabeledDataset(np.empty((0, 2)), np.array([], dtype=str))
        with pytest.raises(InvalidInput):
            sweep(train_set, empty_test, [], 1, exact_match)

    def test_numpy_integer_candidates(self, train_set, test_set):
        result = sweep(train_set, test_set, np.array([1, 3]), np.int64(2), exact_match)
        assert result.candidates == [1, 3]
        assert all(isinstance(candidate, int) for candidate in result.candidates)

    def test_invalid_n_jobs(self):
        with pytest.raises(ValueError):
            HyperparameterSweepEvaluator(n_jobs=0)


class TestSweepSeeding:
    def test_random_state_passed_when_accepted(self, train_set, test_set):
        seeds = []

        def seeded(train, test, k, random_state=None):
            seeds.append(random_state)
            return np.array(test.labels)

        sweep(train_set, test_set, [1, 2], 3, seeded, random_state=7)
        assert len(seeds) == 6
        assert all(isinstance(seed, int) for seed in seeds)
        assert len(set(seeds)) == 6

    def test_seeds_reproducible(self, train_set, test_set):
        def collect_seeds():
            seeds = []

            def seeded(train, test, k, random_state=None):
                seeds.append(random_state)
                return np.array(test.labels)

            sweep(train_set, test_set, [1, 2], 3, seeded, random_state=7)
            return seeds

        assert collect_seeds() == collect_seeds()

    def test_knn_sweep_deterministic_with_seed(self):
        rng = np.random.default_rng(1)
        # Integer features on a small grid produce many equidistant neighbors
        train = LabeledDataset(rng.integers(0, 3, size=(40, 2)), rng.choice(["Up", "Down"], size=40))
        test = LabeledDataset(rng.integers(0, 3, size=(20, 2)), rng.choice(["Up", "Down"], size=20))

        first = sweep(train, test, [1, 3, 5], 10, make_knn_classify_fn(), random_state=42)
        second = sweep(train, test, [1, 3, 5], 10, make_knn_classify_fn(), random_state=42)
        assert first.as_list() == second.as_list()
        assert first.trial_rates == second.trial_rates

    def test_parallel_matches_sequential(self):
        rng = np.random.default_rng(2)
        train = LabeledDataset(rng.integers(0, 3, size=(30, 2)), rng.choice(["A", "B", "C"], size=30))
        test = LabeledDataset(rng.integers(0, 3, size=(15, 2)), rng.choice(["A", "B", "C"], size=15))

        sequential = HyperparameterSweepEvaluator(random_state=3, n_jobs=1).sweep(
            train, test, [1, 2, 4, 7], 6, make_knn_classify_fn()
        )
        parallel = HyperparameterSweepEvaluator(random_state=3, n_jobs=4).sweep(
            train, test, [1, 2, 4, 7], 6, make_knn_classify_fn()
        )
        assert parallel.as_list() == sequential.as_list()
        assert parallel.trial_rates == sequential.trial_rates


class TestSweepCancellation:
    def test_cancel_keeps_finished_candidates(self, train_set, test_set):
        cancel_event = threading.Event()
        calls = []

        def cancel_during_second_candidate(train, test, k):
            calls.append(k)
            if k == 2:
                cancel_event.set()
            return np.array(test.labels)

        evaluator = HyperparameterSweepEvaluator()
        with pytest.raises(SweepCancelled) as exc_info:
            evaluator.sweep(
                train_set, test_set, [1, 2, 3], 3, cancel_during_second_candidate, cancel_event=cancel_event
            )

        partial = exc_info.value.partial_result
        assert partial.as_list() == [(1, 0.0)]
        assert 3 not in calls

    def test_parallel_cancel_keeps_only_complete_candidates(self, train_set, test_set):
        cancel_event = threading.Event()

        def cancel_during_second_candidate(train, test, k):
            if k == 2:
                cancel_event.set()
            elif k > 2:
                # Hold later candidates until the cancellation is visible
                cancel_event.wait(timeout=5)
            return np.array(test.labels)

        evaluator = HyperparameterSweepEvaluator(random_state=0, n_jobs=3)
        with pytest.raises(SweepCancelled) as exc_info:
            evaluator.sweep(
                train_set, test_set, [1, 2, 3, 4, 5, 6], 3, cancel_during_second_candidate, cancel_event=cancel_event
            )

        partial = exc_info.value.partial_result
        assert set(partial.trial_rates) <= {1, 2}
        assert all(len(rates) == 3 for rates in partial.trial_rates.values())
        assert [k for k, _ in partial.as_list()] == sorted(partial.trial_rates)

    def test_cancel_before_start(self, train_set, test_set):
        cancel_event = threading.Event()
        cancel_event.set()

        with pytest.raises(SweepCancelled) as exc_info:
            sweep(train_set, test_set, [1, 2], 2, exact_match, cancel_event=cancel_event)

        assert len(exc_info.value.partial_result) == 0

    def test_unset_event_runs_to_completion(self, train_set, test_set):
        result = sweep(train_set, test_set, [1, 2], 2, exact_match, n_jobs=2, cancel_event=threading.Event())
        assert result.as_list() == [(1, 0.0), (2, 0.0)]
