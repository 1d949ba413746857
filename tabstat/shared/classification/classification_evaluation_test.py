import numpy as np
import pytest

from tabstat.shared.classification.evaluation import ClassificationEvaluator


class TestMisclassificationRate:
    def test_half_wrong(self):
        rate = ClassificationEvaluator.misclassification_rate(np.array(["A", "B"]), np.array(["A", "A"]))
        assert rate == 0.5

    def test_all_correct(self):
        assert ClassificationEvaluator.misclassification_rate(np.array([1, 2, 3]), np.array([1, 2, 3])) == 0.0

    def test_shape_mismatch(self):
        with pytest.raises(ValueError, match="Shape mismatch"):
            ClassificationEvaluator.misclassification_rate(np.array([1, 2]), np.array([1]))

    def test_empty(self):
        with pytest.raises(ValueError):
            ClassificationEvaluator.misclassification_rate(np.array([]), np.array([]))


class TestEvaluate:
    def test_metric_names_match_evaluate(self):
        metrics = ClassificationEvaluator.evaluate(np.array(["A", "B"]), np.array(["A", "A"]))
        assert set(metrics) == set(ClassificationEvaluator.get_metric_names())

    def test_accuracy_complements_misclassification_rate(self):
        y_true = np.array(["Up", "Down", "Up", "Up"])
        y_pred = np.array(["Up", "Up", "Up", "Down"])
        metrics = ClassificationEvaluator.evaluate(y_true, y_pred)
        assert metrics["accuracy"] == pytest.approx(0.5)
        assert metrics["misclassification_rate"] == pytest.approx(0.5)

    def test_per_class_metrics(self):
        y_true = np.array(["A", "A", "B", "B"])
        y_pred = np.array(["A", "B", "B", "B"])
        metrics = ClassificationEvaluator.evaluate(y_true, y_pred, compute_per_class_metrics=True)

        assert metrics["per_class"]["A"]["precision"] == pytest.approx(1.0)
        assert metrics["per_class"]["A"]["recall"] == pytest.approx(0.5)
        assert metrics["per_class"]["B"]["support"] == 2

    def test_macro_ignores_classes_without_support(self):
        y_true = np.array(["A", "A"])
        y_pred = np.array(["A", "C"])
        metrics = ClassificationEvaluator.evaluate(y_true, y_pred)
        assert metrics["macro_recall"] == pytest.approx(0.5)


class TestConfusionTable:
    def test_predicted_rows_true_columns(self):
        y_true = np.array(["Down", "Down", "Up", "Up", "Up"])
        y_pred = np.array(["Down", "Up", "Up", "Up", "Down"])
        table = ClassificationEvaluator.confusion_table(y_true, y_pred)

        assert table.index.name == "predicted"
        assert table.columns.name == "true"
        assert table.loc["Down", "Down"] == 1
        assert table.loc["Up", "Down"] == 1
        assert table.loc["Down", "Up"] == 1
        assert table.loc["Up", "Up"] == 2

    def test_explicit_label_order(self):
        table = ClassificationEvaluator.confusion_table(
            np.array(["a", "b"]), np.array(["a", "a"]), labels=["b", "a", "c"]
        )
        assert table.index.tolist() == ["b", "a", "c"]
        assert table.to_numpy().sum() == 2
        assert table.loc["c"].sum() == 0
