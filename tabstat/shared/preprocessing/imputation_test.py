import numpy as np
import pandas as pd
import pytest

from tabstat.shared.preprocessing.imputation import (
    compute_fill_value,
    drop_missing,
    impute_column,
    impute_missing,
    missing_value_summary,
)


@pytest.fixture
def df():
    return pd.DataFrame(
        {
            "BMI": [20.0, np.nan, 30.0, 40.0],
            "Pulse": [60.0, 70.0, np.nan, np.nan],
            "Gender": ["male", "female", None, "female"],
        }
    )


class TestMissingValueSummary:
    def test_counts(self, df):
        summary = missing_value_summary(df)
        assert summary["total_missing"] == 4
        assert summary["rows_with_missing"] == 3
        assert summary["per_column"] == {"BMI": 1, "Pulse": 2, "Gender": 1}


class TestDropMissing:
    def test_all_columns(self, df):
        result = drop_missing(df)
        assert len(result) == 1
        assert result.index.tolist() == [0]

    def test_subset_of_columns(self, df):
        result = drop_missing(df, columns=["BMI"])
        assert result["BMI"].tolist() == [20.0, 30.0, 40.0]
        assert result.index.tolist() == [0, 1, 2]

    def test_input_unchanged(self, df):
        drop_missing(df)
        assert len(df) == 4


class TestComputeFillValue:
    def test_mean(self, df):
        assert compute_fill_value(df["BMI"], "mean") == pytest.approx(30.0)

    def test_median(self):
        assert compute_fill_value(pd.Series([1.0, 2.0, 10.0, np.nan]), "median") == 2.0

    def test_mode(self, df):
        assert compute_fill_value(df["Gender"], "mode") == "female"

    def test_mode_tie_takes_smallest(self):
        assert compute_fill_value(pd.Series([3, 1, 3, 1]), "mode") == 1

    def test_mean_of_text_column(self, df):
        with pytest.raises(ValueError, match="numeric"):
            compute_fill_value(df["Gender"], "mean")

    def test_no_observed_values(self):
        with pytest.raises(ValueError, match="no observed values"):
            compute_fill_value(pd.Series([np.nan, np.nan], name="empty"), "mean")

    def test_unknown_strategy(self, df):
        with pytest.raises(ValueError, match="Unknown imputation strategy"):
            compute_fill_value(df["BMI"], "zero")


class TestImpute:
    def test_impute_column(self, df):
        result = impute_column(df, "BMI", "mean")
        assert result["BMI"].tolist() == [20.0, 30.0, 30.0, 40.0]
        assert np.isnan(df.loc[1, "BMI"])

    def test_impute_column_without_missing_values(self, df):
        result = impute_column(df.dropna(subset=["BMI"]), "BMI", "median")
        assert result["BMI"].tolist() == [20.0, 30.0, 40.0]

    def test_impute_missing_column(self, df):
        with pytest.raises(ValueError, match="Column not found"):
            impute_column(df, "Age", "mean")

    def test_impute_missing_several_columns(self, df):
        result = impute_missing(df, {"BMI": "median", "Pulse": "mean", "Gender": "mode"})
        assert result.isna().sum().sum() == 0
        assert result["Pulse"].tolist() == [60.0, 70.0, 65.0, 65.0]
        assert result.loc[2, "Gender"] == "female"

    def test_impute_missing_returns_copy(self, df):
        result = impute_missing(df, {})
        assert result is not df
        pd.testing.assert_frame_equal(result, df)
