import numpy as np
import pytest

from tabstat.shared.regression import LinearRegressionConfig, LinearRegressionModel, RegressionEvaluator


@pytest.fixture
def linear_data():
    features = np.array([[0.0, 1.0], [1.0, 0.0], [2.0, 2.0], [3.0, 1.0], [4.0, 3.0], [5.0, 0.0]])
    targets = 1.5 + 2.0 * features[:, 0] - 0.5 * features[:, 1]
    return features, targets


class TestLinearRegressionModel:
    def test_recovers_exact_coefficients(self, linear_data):
        features, targets = linear_data
        model = LinearRegressionModel(LinearRegressionConfig()).fit(features, targets)

        assert model.is_fitted
        assert model.intercept == pytest.approx(1.5)
        coefficients = model.get_coefficients(["BMI", "Age"])
        assert coefficients["BMI"] == pytest.approx(2.0)
        assert coefficients["Age"] == pytest.approx(-0.5)
        np.testing.assert_allclose(model.predict(features), targets)

    def test_without_intercept(self, linear_data):
        features, _ = linear_data
        targets = 3.0 * features[:, 0]
        model = LinearRegressionModel(LinearRegressionConfig(fit_intercept=False)).fit(features, targets)
        assert model.intercept == 0.0
        assert model.get_coefficients()["feature_0"] == pytest.approx(3.0)

    def test_unfitted_model(self):
        model = LinearRegressionModel(LinearRegressionConfig())
        assert model.intercept is None
        assert model.get_coefficients() is None
        with pytest.raises(ValueError, match="fitted"):
            model.predict(np.zeros((1, 1)))

    def test_too_few_samples(self):
        with pytest.raises(ValueError, match="more samples than parameters"):
            LinearRegressionModel(LinearRegressionConfig()).fit(np.zeros((2, 1)), np.zeros(2))

    def test_target_length_mismatch(self, linear_data):
        features, _ = linear_data
        with pytest.raises(ValueError, match="Targets must be 1D"):
            LinearRegressionModel(LinearRegressionConfig()).fit(features, np.zeros(3))


class TestRegressionEvaluator:
    def test_perfect_fit(self):
        metrics = RegressionEvaluator.evaluate([1.0, 2.0, 3.0, 4.0], [1.0, 2.0, 3.0, 4.0], n_features=1)
        assert metrics["r2"] == 1.0
        assert metrics["adjusted_r2"] == 1.0
        assert metrics["rmse"] == 0.0
        assert metrics["mae"] == 0.0
        assert metrics["n_samples"] == 4

    def test_errors(self):
        metrics = RegressionEvaluator.evaluate([0.0, 0.0, 0.0, 4.0], [1.0, -1.0, 1.0, 3.0])
        assert metrics["mae"] == pytest.approx(1.0)
        assert metrics["rmse"] == pytest.approx(1.0)
        assert metrics["adjusted_r2"] is None

    def test_adjusted_r2(self):
        y_true = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        y_pred = np.array([1.1, 1.9, 3.2, 3.8, 5.0])
        metrics = RegressionEvaluator.evaluate(y_true, y_pred, n_features=2)
        assert metrics["adjusted_r2"] == pytest.approx(1 - (1 - metrics["r2"]) * 4 / 2)

    def test_adjusted_r2_undefined(self):
        metrics = RegressionEvaluator.evaluate([1.0, 2.0, 3.0], [1.0, 2.0, 2.0], n_features=2)
        assert metrics["adjusted_r2"] is None

    def test_shape_mismatch(self):
        with pytest.raises(ValueError, match="Shape mismatch"):
            RegressionEvaluator.evaluate([1.0, 2.0], [1.0])

    def test_single_sample(self):
        with pytest.raises(ValueError, match="At least 2 samples"):
            RegressionEvaluator.evaluate([1.0], [1.0])
