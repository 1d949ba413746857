import numpy as np
import pandas as pd
import pytest

from tabstat.datasets.loading import generate_smarket, load_csv


class TestLoadCsv:
    def test_na_values(self, tmp_path):
        path = tmp_path / "nhanes.csv"
        path.write_text("Age,BMI,Gender\n34,NA,male\n51,27.5,?\n")

        df = load_csv(str(path), na_values=["NA", "?"])
        assert df["BMI"].isna().tolist() == [True, False]
        assert df["Gender"].isna().tolist() == [False, True]

    def test_column_selection(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("a,b,c\n1,2,3\n")

        df = load_csv(str(path), columns=["c", "a"])
        assert list(df.columns) == ["c", "a"]

    def test_unknown_column(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("a,b\n1,2\n")
        with pytest.raises(ValueError, match="Columns not found"):
            load_csv(str(path), columns=["z"])

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_csv(str(tmp_path / "missing.csv"))


class TestGenerateSmarket:
    def test_shape_and_columns(self):
        df = generate_smarket(n_days=500, random_state=0)
        assert len(df) == 500
        assert list(df.columns) == ["Year", "Lag1", "Lag2", "Lag3", "Lag4", "Lag5", "Volume", "Today", "Direction"]
        assert df["Year"].tolist()[:1] == [2001]
        assert df["Year"].max() == 2002

    def test_direction_matches_today(self):
        df = generate_smarket(n_days=200, random_state=1)
        assert ((df["Today"] > 0) == (df["Direction"] == "Up")).all()

    def test_lags_are_shifted_returns(self):
        df = generate_smarket(n_days=50, random_state=2)
        np.testing.assert_array_equal(df["Lag1"].to_numpy()[1:], df["Today"].to_numpy()[:-1])
        np.testing.assert_array_equal(df["Lag2"].to_numpy()[1:], df["Lag1"].to_numpy()[:-1])

    def test_reproducible(self):
        pd.testing.assert_frame_equal(generate_smarket(100, random_state=5), generate_smarket(100, random_state=5))

    def test_invalid_days(self):
        with pytest.raises(ValueError):
            generate_smarket(n_days=0)
