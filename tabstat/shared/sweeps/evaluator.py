import inspect
import logging
import threading
import time
from multiprocessing.pool import ThreadPool
from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np
from tqdm import tqdm

from tabstat.datasets.dataset import LabeledDataset
from .errors import EmptyTestSet, InvalidInput, SweepCancelled
from .result import SweepResult


logger = logging.getLogger(__name__)

ClassifyFn = Callable[..., Any]


def _accepts_random_state(classify_fn: ClassifyFn) -> bool:
    """Check whether classify_fn can take a `random_state` keyword argument"""
    try:
        parameters = inspect.signature(classify_fn).parameters
    except (TypeError, ValueError):
        return False

    if "random_state" in parameters:
        return parameters["random_state"].kind in (
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.KEYWORD_ONLY,
        )
    return any(parameter.kind == inspect.Parameter.VAR_KEYWORD for parameter in parameters.values())


def validate_sweep_inputs(
    train: LabeledDataset,
    test: LabeledDataset,
    candidates: Sequence[int],
    trials_per_candidate: int,
    classify_fn: ClassifyFn,
) -> List[int]:
    """
    Validate sweep arguments.

    Args:
        train: Training dataset
        test: Held-out test dataset
        candidates: Candidate hyperparameter values
        trials_per_candidate: Number of repeated trials per candidate
        classify_fn: Classifier capability

    Returns:
        Candidates as a list of Python ints, in the given order

    Raises:
        InvalidInput: If any argument is malformed or train/test dimensionality differs
        EmptyTestSet: If the test dataset has no instances
    """
    if not isinstance(train, LabeledDataset):
        raise InvalidInput(f"train must be a LabeledDataset, got {type(train).__name__}")
    if not isinstance(test, LabeledDataset):
        raise InvalidInput(f"test must be a LabeledDataset, got {type(test).__name__}")
    if not callable(classify_fn):
        raise InvalidInput("classify_fn must be callable")

    if train.n_features != test.n_features:
        raise InvalidInput(f"Feature count mismatch: train={train.n_features}, test={test.n_features}")

    candidates = list(candidates)
    if not candidates:
        raise InvalidInput("candidates must not be empty")
    for candidate in candidates:
        if isinstance(candidate, (bool, np.bool_)) or not isinstance(candidate, (int, np.integer)):
            raise InvalidInput(f"Candidates must be integers, got {candidate!r}")
        if candidate <= 0:
            raise InvalidInput(f"Candidates must be positive, got {candidate}")
    candidates = [int(candidate) for candidate in candidates]
    if len(set(candidates)) != len(candidates):
        duplicates = sorted({candidate for candidate in candidates if candidates.count(candidate) > 1})
        raise InvalidInput(f"Duplicate candidates found: {duplicates}")

    if (
        isinstance(trials_per_candidate, (bool, np.bool_))
        or not isinstance(trials_per_candidate, (int, np.integer))
        or trials_per_candidate < 1
    ):
        raise InvalidInput(f"trials_per_candidate must be a positive integer, got {trials_per_candidate!r}")

    if len(train) == 0:
        raise InvalidInput("Training set is empty")
    if len(test) == 0:
        raise EmptyTestSet("Test set is empty, misclassification rate is undefined")

    return candidates


class HyperparameterSweepEvaluator:
    """
    Estimates the out-of-sample misclassification rate of a stochastic classifier
    for each candidate hyperparameter value, averaging over repeated trials.

    The sweep is a map-reduce over the candidates x trials cross product: each
    trial calls `classify_fn` once and yields one misclassification rate, and the
    rates of a candidate are averaged once all of its trials have finished.
    Trials are independent, so with `n_jobs > 1` they run on a thread pool.

    If `classify_fn` accepts a `random_state` keyword, every trial receives its
    own seed drawn from a `numpy.random.SeedSequence` built from `random_state`,
    so a fixed `random_state` makes the whole sweep reproducible regardless of
    `n_jobs`.
    """

    def __init__(self, random_state: Optional[int] = None, n_jobs: int = 1, show_progress: bool = False):
        """
        Args:
            random_state: Seed for the per-trial seeds; None draws fresh entropy
            n_jobs: Number of worker threads; 1 runs trials sequentially
            show_progress: Show a tqdm progress bar over all trials
        """
        if n_jobs < 1:
            raise ValueError(f"n_jobs must be at least 1, got {n_jobs}")

        self.random_state = random_state
        self.n_jobs = n_jobs
        self.show_progress = show_progress

    def _trial_seeds(self, n_trials: int) -> List[int]:
        seed_sequence = np.random.SeedSequence(self.random_state)
        return [int(seed) for seed in seed_sequence.generate_state(n_trials)]

    def sweep(
        self,
        train: LabeledDataset,
        test: LabeledDataset,
        candidates: Sequence[int],
        trials_per_candidate: int,
        classify_fn: ClassifyFn,
        cancel_event: Optional[threading.Event] = None,
    ) -> SweepResult:
        """
        Compute the mean misclassification rate for every candidate.

        Args:
            train: Training dataset, passed unchanged to classify_fn
            test: Test dataset, passed unchanged to classify_fn
            candidates: Non-empty sequence of distinct positive integers
            trials_per_candidate: Number of classify_fn calls per candidate
            classify_fn: ``classify_fn(train, test, k) -> predicted_labels`` returning
                one label per test instance; optionally accepts ``random_state``
            cancel_event: When set, remaining trials are skipped and SweepCancelled is raised

        Returns:
            SweepResult with one (candidate, mean_rate) pair per candidate, in order

        Raises:
            InvalidInput: On malformed arguments or a wrong number of predictions
            EmptyTestSet: If the test dataset is empty
            SweepCancelled: If cancel_event was set before all trials finished
        """
        candidates = validate_sweep_inputs(train, test, candidates, trials_per_candidate, classify_fn)
        trials_per_candidate = int(trials_per_candidate)

        pass_random_state = _accepts_random_state(classify_fn)
        tasks = [
            (candidate, trial_idx)
            for candidate in candidates
            for trial_idx in range(trials_per_candidate)
        ]
        seeds = self._trial_seeds(len(tasks))
        true_labels = test.labels

        logger.info(
            f"Starting sweep over {len(candidates)} candidates x {trials_per_candidate} trials "
            f"({len(train)} train / {len(test)} test instances, n_jobs={self.n_jobs})"
        )
        start_time = time.time()

        def run_trial(task_idx: int) -> Optional[float]:
            if cancel_event is not None and cancel_event.is_set():
                return None

            candidate, _ = tasks[task_idx]
            if pass_random_state:
                predictions = classify_fn(train, test, candidate, random_state=seeds[task_idx])
            else:
                predictions = classify_fn(train, test, candidate)

            predictions = np.asarray(predictions)
            if predictions.shape != true_labels.shape:
                raise InvalidInput(
                    f"classify_fn returned predictions of shape {predictions.shape} "
                    f"for {len(true_labels)} test instances (candidate {candidate})"
                )
            return float(np.mean(predictions != true_labels))

        rates_by_candidate = {candidate: [] for candidate in candidates}
        cancelled = False

        with tqdm(total=len(tasks), desc="Sweeping candidates", disable=not self.show_progress) as pbar:
            if self.n_jobs == 1:
                for task_idx in range(len(tasks)):
                    rate = run_trial(task_idx)
                    cancelled = cancelled or rate is None
                    if rate is not None:
                        rates_by_candidate[tasks[task_idx][0]].append(rate)
                    pbar.update(1)
            else:
                with ThreadPool(self.n_jobs) as pool:
                    # imap yields in task order, so each candidate is reduced after its last trial arrives
                    for task_idx, rate in enumerate(pool.imap(run_trial, range(len(tasks)))):
                        cancelled = cancelled or rate is None
                        if rate is not None:
                            rates_by_candidate[tasks[task_idx][0]].append(rate)
                        pbar.update(1)

        finished = [
            candidate for candidate in candidates if len(rates_by_candidate[candidate]) == trials_per_candidate
        ]
        result = self._build_result(finished, rates_by_candidate, trials_per_candidate)

        if cancelled:
            logger.warning(f"Sweep cancelled after completing {len(finished)}/{len(candidates)} candidates")
            raise SweepCancelled(
                f"Sweep cancelled after completing {len(finished)}/{len(candidates)} candidates",
                partial_result=result,
            )

        logger.info(f"Sweep completed in {time.time() - start_time:.2f}s")
        return result

    def _build_result(
        self, candidates: List[int], rates_by_candidate: dict, trials_per_candidate: int
    ) -> SweepResult:
        points: List[Tuple[int, float]] = []
        trial_rates = {}
        for candidate in candidates:
            rates = rates_by_candidate[candidate]
            mean_rate = float(np.mean(rates))
            points.append((candidate, mean_rate))
            trial_rates[candidate] = tuple(rates)
            logger.debug(f"k={candidate}: mean misclassification rate {mean_rate:.4f} over {len(rates)} trials")

        return SweepResult(
            points=tuple(points),
            trial_rates=trial_rates,
            trials_per_candidate=trials_per_candidate,
            random_state=self.random_state,
        )


def sweep(
    train: LabeledDataset,
    test: LabeledDataset,
    candidates: Sequence[int],
    trials_per_candidate: int,
    classify_fn: ClassifyFn,
    random_state: Optional[int] = None,
    n_jobs: int = 1,
    cancel_event: Optional[threading.Event] = None,
) -> SweepResult:
    """Run a hyperparameter sweep with a one-off HyperparameterSweepEvaluator."""
    evaluator = HyperparameterSweepEvaluator(random_state=random_state, n_jobs=n_jobs)
    return evaluator.sweep(train, test, candidates, trials_per_candidate, classify_fn, cancel_event=cancel_event)
