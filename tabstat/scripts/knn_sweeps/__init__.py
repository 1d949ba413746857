"""
KNN sweeps module for choosing the neighborhood size of a k-nearest-neighbors classifier.

This module estimates the test misclassification rate of KNN for a range of
neighborhood sizes k, repeating each fit/predict several times so that random
tie-breaking averages out, with support for:
- CSV datasets or a generated Smarket-style market dataset
- Mean/median/mode imputation and dropping of incomplete rows
- Random, stratified or query-based ("Year == 2005") train/test splits
- Optional feature scaling fitted on the training split
- Parallel trials with reproducible per-trial seeds
- CSV reporting with one row per candidate k

Usage:
    python -m tabstat.scripts.knn_sweeps.run --config path/to/config.yaml
"""
