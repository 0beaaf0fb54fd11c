"""
Unit tests for the time series toolbox.
"""

import numpy as np
import pandas as pd
import pytest


def _yearly_frame(n=12):
    return pd.DataFrame({"time": pd.date_range("2000-01-01", periods=n, freq="YS"),
                         "value": np.arange(1.0, n + 1)})


@pytest.mark.unit
class TestCheckLong:
    """Tests for long-format validation."""

    def test_missing_value_column(self):
        from tscore.errors import ShapeValidationError
        from tscore.toolbox import check_long
        with pytest.raises(ShapeValidationError):
            check_long(pd.DataFrame({"time": ["2020-01-01"]}))

    def test_wide_columns_rejected(self, wide_frame):
        from tscore.errors import ShapeValidationError
        from tscore.toolbox import check_long
        with pytest.raises(ShapeValidationError):
            check_long(wide_frame)

    def test_duplicate_times(self):
        from tscore.errors import ShapeValidationError
        from tscore.toolbox import check_long
        frame = pd.DataFrame({"time": ["2020-01-01", "2020-01-01"], "value": [1, 2]})
        with pytest.raises(ShapeValidationError):
            check_long(frame)

    def test_same_time_in_different_series_is_fine(self):
        from tscore.toolbox import check_long
        frame = pd.DataFrame({"id": ["a", "b"], "time": ["2020-01-01", "2020-01-01"], "value": [1, 2]})
        assert len(check_long(frame)) == 2

    def test_normalizes_copy(self):
        from tscore.toolbox import check_long
        frame = pd.DataFrame({"time": ["2020-01-01", "2020-02-01"], "value": [1, 2]})
        checked = check_long(frame)
        assert pd.api.types.is_datetime64_any_dtype(checked["time"])
        assert checked["value"].dtype == float
        assert not pd.api.types.is_datetime64_any_dtype(frame["time"]), "Input must not be mutated"
        assert list(frame["time"]) == ["2020-01-01", "2020-02-01"]

    def test_not_a_frame(self):
        from tscore.errors import ShapeValidationError
        from tscore.toolbox import check_long
        with pytest.raises(ShapeValidationError):
            check_long([1, 2, 3])


@pytest.mark.unit
class TestChanges:
    """Tests for percentage changes and differences."""

    def test_pc(self):
        from tscore.toolbox import ts_pc
        frame = pd.DataFrame({"time": pd.date_range("2020-01-01", periods=3, freq="MS"),
                              "value": [100.0, 110.0, 121.0]})
        result = ts_pc(frame)
        assert np.isnan(result["value"].iloc[0])
        assert np.allclose(result["value"].iloc[1:], [10.0, 10.0])

    def test_pcy(self, monthly_frame):
        from tscore.toolbox import ts_pcy
        result = ts_pcy(monthly_frame)
        assert result["value"].iloc[:12].isna().all(), "First year has no comparison"
        expected = (monthly_frame["value"].iloc[12:].to_numpy() / monthly_frame["value"].iloc[:12].to_numpy() - 1) * 100
        assert np.allclose(result["value"].iloc[12:], expected)

    def test_diff_and_diffy(self, monthly_frame):
        from tscore.toolbox import ts_diff, ts_diffy
        assert np.allclose(ts_diff(monthly_frame)["value"].iloc[1:], 10.0)
        diffy = ts_diffy(monthly_frame)["value"]
        assert diffy.iloc[:12].isna().all()
        assert np.allclose(diffy.iloc[12:], 120.0)

    def test_pcy_weekly(self):
        from tscore.toolbox import ts_pcy
        times = pd.date_range("2020-01-06", periods=104, freq="W-MON")
        frame = pd.DataFrame({"time": times, "value": np.arange(1.0, 105.0)})
        result = ts_pcy(frame)["value"]
        assert result.iloc[:52].isna().all(), "First year has no comparison"
        assert result.notna().sum() == 52
        expected = (np.arange(53.0, 105.0) / np.arange(1.0, 53.0) - 1) * 100
        assert np.allclose(result.iloc[52:], expected), "Same week of the previous year"

    def test_diffy_weekly(self):
        from tscore.toolbox import ts_diffy
        times = pd.date_range("2020-01-06", periods=104, freq="W-MON")
        frame = pd.DataFrame({"time": times, "value": np.arange(1.0, 105.0)})
        result = ts_diffy(frame)["value"]
        assert result.iloc[:52].isna().all()
        assert np.allclose(result.iloc[52:], 52.0)

    def test_diffy_daily_leap_year(self, daily_frame):
        from tscore.toolbox import ts_diffy
        result = ts_diffy(daily_frame).set_index("time")["value"]
        assert np.isnan(result[pd.Timestamp("2019-12-31")])
        assert result[pd.Timestamp("2020-03-01")] == (
            daily_frame.set_index("time")["value"][pd.Timestamp("2020-03-01")]
            - daily_frame.set_index("time")["value"][pd.Timestamp("2019-03-01")])

    def test_pca_annualizes(self):
        from tscore.toolbox import ts_pca
        times = pd.date_range("2020-01-01", periods=6, freq="MS")
        frame = pd.DataFrame({"time": times, "value": 100 * 1.01 ** np.arange(6)})
        result = ts_pca(frame)
        assert np.allclose(result["value"].iloc[1:], (1.01 ** 12 - 1) * 100)

    def test_per_series(self, multi_frame):
        from tscore.toolbox import ts_pc
        result = ts_pc(multi_frame)
        assert list(pd.unique(result["id"])) == ["a", "b", "c"], "Series order is kept"
        assert result.groupby("id")["value"].apply(lambda v: np.isnan(v.iloc[0])).all(), \
            "Each series starts with a missing change"

    def test_input_not_mutated(self, monthly_frame):
        from tscore.toolbox import ts_pc
        before = monthly_frame.copy()
        ts_pc(monthly_frame)
        pd.testing.assert_frame_equal(monthly_frame, before)


@pytest.mark.unit
class TestFrequencyConversion:
    """Tests for ts_frequency."""

    def test_month_to_quarter_mean(self, monthly_frame):
        from tscore.toolbox import ts_frequency
        result = ts_frequency(monthly_frame, to="quarter", aggregate="mean")
        assert len(result) == 8
        assert result["time"].iloc[0] == pd.Timestamp("2020-01-01")
        assert result["value"].iloc[0] == pytest.approx(20.0)

    def test_day_to_year_sum(self, daily_frame):
        from tscore.toolbox import ts_frequency
        result = ts_frequency(daily_frame, to="year", aggregate="sum")
        expected = daily_frame.groupby(daily_frame["time"].dt.year)["value"].sum()
        assert list(result["time"]) == [pd.Timestamp("2019-01-01"), pd.Timestamp("2020-01-01")]
        assert np.allclose(result["value"], expected.to_numpy())

    @pytest.mark.parametrize("aggregate, expected", [
        ("first", 10.0), ("last", 120.0), ("min", 10.0), ("max", 120.0),
    ])
    def test_other_aggregates(self, monthly_frame, aggregate, expected):
        from tscore.toolbox import ts_frequency
        result = ts_frequency(monthly_frame, to="year", aggregate=aggregate)
        assert result["value"].iloc[0] == pytest.approx(expected)

    def test_na_rm(self, monthly_frame):
        from tscore.toolbox import ts_frequency
        frame = monthly_frame.copy()
        frame.loc[2, "value"] = np.nan
        kept = ts_frequency(frame, to="year", aggregate="mean", na_rm=True)
        strict = ts_frequency(frame, to="year", aggregate="mean", na_rm=False)
        assert kept["value"].iloc[0] == pytest.approx(frame["value"].iloc[:12].mean())
        assert np.isnan(strict["value"].iloc[0]), "A missing value spoils the period"
        assert not np.isnan(strict["value"].iloc[1])

    def test_year_to_quarter_interpolates(self):
        from tscore.toolbox import ts_frequency
        frame = pd.DataFrame({"time": pd.to_datetime(["2020-01-01", "2021-01-01"]), "value": [0.0, 4.0]})
        result = ts_frequency(frame, to="quarter")
        assert len(result) == 5
        assert result["value"].iloc[0] == 0.0
        assert result["value"].iloc[-1] == 4.0
        assert result["value"].is_monotonic_increasing

    def test_unknown_aggregate(self, monthly_frame):
        from tscore.errors import InvalidOptionError
        from tscore.toolbox import ts_frequency
        with pytest.raises(InvalidOptionError):
            ts_frequency(monthly_frame, to="year", aggregate="median")


@pytest.mark.unit
class TestLagAndSpan:
    """Tests for ts_lag and ts_span."""

    def test_lag_shifts_time(self, monthly_frame):
        from tscore.toolbox import ts_lag
        result = ts_lag(monthly_frame, by=2)
        assert result["time"].iloc[0] == pd.Timestamp("2020-03-01")
        assert np.allclose(result["value"], monthly_frame["value"])

    def test_lead(self, monthly_frame):
        from tscore.toolbox import ts_lag
        result = ts_lag(monthly_frame, by=-1)
        assert result["time"].iloc[0] == pd.Timestamp("2019-12-01")

    def test_lag_zero(self, monthly_frame):
        from tscore.toolbox import ts_lag
        pd.testing.assert_frame_equal(ts_lag(monthly_frame, by=0), monthly_frame)

    def test_span_partial_dates(self, monthly_frame):
        from tscore.toolbox import ts_span
        result = ts_span(monthly_frame, start="2020-06", end="2020-08")
        assert list(result["time"].dt.month) == [6, 7, 8]

    def test_span_open_end(self, monthly_frame):
        from tscore.toolbox import ts_span
        assert len(ts_span(monthly_frame, start="2021")) == 12
        assert len(ts_span(monthly_frame, end="2020-03")) == 3

    def test_span_start_after_end(self, monthly_frame):
        from tscore.errors import InvalidOptionError
        from tscore.toolbox import ts_span
        with pytest.raises(InvalidOptionError):
            ts_span(monthly_frame, start="2021", end="2020")


@pytest.mark.unit
class TestScaling:
    """Tests for index, scale and minmax."""

    def test_index_first_observation(self, monthly_frame):
        from tscore.toolbox import ts_index
        result = ts_index(monthly_frame)
        assert result["value"].iloc[0] == pytest.approx(100.0)
        assert result["value"].iloc[1] == pytest.approx(200.0)

    def test_index_base_period_mean(self, monthly_frame):
        from tscore.toolbox import ts_index
        result = ts_index(monthly_frame, base="2020")
        assert result["value"].iloc[:12].mean() == pytest.approx(100.0)

    def test_index_base_without_data(self, monthly_frame):
        from tscore.errors import ShapeValidationError
        from tscore.toolbox import ts_index
        with pytest.raises(ShapeValidationError):
            ts_index(monthly_frame, base="1999")

    def test_scale(self, multi_frame):
        from tscore.toolbox import ts_scale
        result = ts_scale(multi_frame)
        stats = result.groupby("id")["value"].agg(["mean", "std"])
        assert np.allclose(stats["mean"], 0.0)
        assert np.allclose(stats["std"], 1.0)

    def test_minmax_is_global(self, multi_frame):
        from tscore.toolbox import ts_minmax
        result = ts_minmax(multi_frame)
        assert result["value"].min() == pytest.approx(0.0)
        assert result["value"].max() == pytest.approx(1.0)
        assert result.groupby("id")["value"].max().lt(1.0).sum() == 2, "Only one series reaches the maximum"


@pytest.mark.unit
class TestDecomposition:
    """Tests for ts_decompose."""

    def test_stl_components_add_up(self, seasonal_frame):
        from tscore.toolbox import ts_decompose
        parts = {c: ts_decompose(seasonal_frame, c, "stl")["value"].to_numpy()
                 for c in ("trend", "seasonal", "remainder", "seasonal_adjusted")}
        observed = seasonal_frame["value"].to_numpy()
        assert np.allclose(parts["trend"] + parts["seasonal"] + parts["remainder"], observed)
        assert np.allclose(parts["seasonal_adjusted"], observed - parts["seasonal"])

    def test_hp_filter(self, seasonal_frame):
        from tscore.toolbox import ts_decompose
        trend = ts_decompose(seasonal_frame, "trend", "hp_filter")["value"].to_numpy()
        remainder = ts_decompose(seasonal_frame, "remainder", "hp_filter")["value"].to_numpy()
        assert np.allclose(trend + remainder, seasonal_frame["value"].to_numpy())

    def test_hp_filter_has_no_seasonal(self, seasonal_frame):
        from tscore.errors import InvalidOptionError
        from tscore.toolbox import ts_decompose
        with pytest.raises(InvalidOptionError):
            ts_decompose(seasonal_frame, "seasonal", "hp_filter")

    def test_missing_values_kept_in_place(self, seasonal_frame):
        from tscore.toolbox import ts_decompose
        frame = seasonal_frame.copy()
        frame.loc[5, "value"] = np.nan
        result = ts_decompose(frame, "trend", "hp_filter")
        assert len(result) == len(frame)
        assert np.isnan(result["value"].iloc[5])
        assert result["value"].drop(index=5).notna().all()

    def test_stl_needs_seasonal_period(self):
        from tscore.toolbox import ts_decompose
        with pytest.raises(ValueError):
            ts_decompose(_yearly_frame(), "trend", "stl")

    def test_hp_lambda(self):
        from tscore.frequency import Granularity
        from tscore.toolbox import hp_lambda
        assert hp_lambda(Granularity.QUARTER) == 1600.0
        assert hp_lambda(Granularity.YEAR) == 100.0
        assert hp_lambda(Granularity.MONTH) == 14400.0


@pytest.mark.unit
class TestForecast:
    """Tests for ts_forecast."""

    def test_forecast_continues_series(self, seasonal_frame):
        from tscore.toolbox import ts_forecast
        result = ts_forecast(seasonal_frame, h=12)
        assert list(result.columns) == ["time", "value"]
        assert len(result) == 12
        assert result["time"].iloc[0] == pd.Timestamp("2020-01-01")
        assert result["time"].iloc[-1] == pd.Timestamp("2020-12-01")
        assert np.isfinite(result["value"]).all()

    def test_horizon_one(self, monthly_frame):
        from tscore.toolbox import ts_forecast
        result = ts_forecast(monthly_frame, h=1)
        assert len(result) == 1

    def test_per_series(self, multi_frame):
        from tscore.toolbox import ts_forecast
        result = ts_forecast(multi_frame, h=3)
        assert result.groupby("id").size().to_dict() == {"a": 3, "b": 3, "c": 3}

    def test_too_short(self):
        from tscore.errors import ShapeValidationError
        from tscore.toolbox import ts_forecast
        frame = pd.DataFrame({"time": [pd.Timestamp("2020-01-01")], "value": [1.0]})
        with pytest.raises(ShapeValidationError):
            ts_forecast(frame, h=2)


@pytest.mark.unit
class TestPrincipalComponents:
    """Tests for ts_prcomp."""

    def test_components(self, multi_frame):
        from tscore.toolbox import ts_prcomp
        result = ts_prcomp(multi_frame, n_components=2)
        assert list(pd.unique(result["id"])) == ["PC1", "PC2"]
        assert result.groupby("id").size().to_dict() == {"PC1": 36, "PC2": 36}

    def test_components_capped(self, multi_frame):
        from tscore.toolbox import ts_prcomp
        result = ts_prcomp(multi_frame, n_components=10, standardize=False)
        assert list(pd.unique(result["id"])) == ["PC1", "PC2", "PC3"]

    def test_first_component_has_most_variance(self, multi_frame):
        from tscore.toolbox import ts_prcomp
        result = ts_prcomp(multi_frame, n_components=3)
        variances = result.groupby("id")["value"].var()
        assert variances["PC1"] >= variances["PC2"] >= variances["PC3"]

    def test_univariate_rejected(self, monthly_frame):
        from tscore.errors import ShapeValidationError
        from tscore.toolbox import ts_prcomp
        with pytest.raises(ShapeValidationError):
            ts_prcomp(monthly_frame)


@pytest.mark.unit
class TestReshaping:
    """Tests for pick, long, wide, tbl and bind."""

    def test_pick_order(self, multi_frame):
        from tscore.toolbox import ts_pick
        result = ts_pick(multi_frame, ["c", "a"])
        assert list(pd.unique(result["id"])) == ["c", "a"]

    def test_pick_missing(self, multi_frame):
        from tscore.errors import ShapeValidationError
        from tscore.toolbox import ts_pick
        with pytest.raises(ShapeValidationError):
            ts_pick(multi_frame, ["a", "zzz"])

    def test_pick_univariate(self, monthly_frame):
        from tscore.errors import ShapeValidationError
        from tscore.toolbox import ts_pick
        with pytest.raises(ShapeValidationError):
            ts_pick(monthly_frame, ["value"])

    def test_long_from_wide(self, wide_frame):
        from tscore.toolbox import ts_long
        result = ts_long(wide_frame)
        assert list(result.columns) == ["id", "time", "value"]
        assert list(pd.unique(result["id"])) == ["sales", "costs"], "Text columns are not series"
        assert len(result) == 12

    def test_long_detects_year_column(self):
        from tscore.toolbox import ts_long
        frame = pd.DataFrame({"year": [2000, 2001, 2002], "x": [1.0, 2.0, 3.0]})
        result = ts_long(frame)
        assert result["time"].iloc[0] == pd.Timestamp("2000-01-01")

    def test_long_detects_text_dates(self):
        from tscore.toolbox import find_time_column
        frame = pd.DataFrame({"when": ["2020-01-01", "2020-02-01"], "x": [1.0, 2.0]})
        assert find_time_column(frame) == "when"

    def test_long_without_time_column(self):
        from tscore.errors import ShapeValidationError
        from tscore.toolbox import ts_long
        with pytest.raises(ShapeValidationError):
            ts_long(pd.DataFrame({"x": [1.0, 2.0], "label": ["a", "b"]}))

    def test_long_passes_long_frames(self, multi_frame):
        from tscore.toolbox import ts_long, ts_tbl
        pd.testing.assert_frame_equal(ts_long(multi_frame), ts_tbl(multi_frame))

    def test_wide(self, multi_frame):
        from tscore.toolbox import ts_wide
        result = ts_wide(multi_frame)
        assert list(result.columns) == ["time", "a", "b", "c"]
        assert len(result) == 36

    def test_tbl_sorts(self, multi_frame):
        from tscore.toolbox import ts_tbl
        shuffled = multi_frame.sample(frac=1.0, random_state=1)
        result = ts_tbl(shuffled)
        for _, group in result.groupby("id"):
            assert group["time"].is_monotonic_increasing

    def test_bind_names_unnamed_inputs(self, monthly_frame):
        from tscore.inputs import Frames
        from tscore.toolbox import ts_c
        result = ts_c(Frames((monthly_frame, monthly_frame)))
        assert list(pd.unique(result["id"])) == ["series1", "series2"]
        assert len(result) == 48

    def test_bind_uses_names(self, monthly_frame, multi_frame):
        from tscore.inputs import resolve_input
        from tscore.toolbox import ts_c
        result = ts_c(resolve_input({"sales": monthly_frame, "panel": multi_frame}))
        assert list(pd.unique(result["id"])) == ["sales", "a", "b", "c"]

    def test_bind_makes_ids_unique(self, multi_frame):
        from tscore.inputs import Frames
        from tscore.toolbox import ts_c
        result = ts_c(Frames((multi_frame, multi_frame)))
        assert list(pd.unique(result["id"])) == ["a", "b", "c", "a_2", "b_2", "c_2"]
