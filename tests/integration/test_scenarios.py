"""
End-to-end scenarios: blocks constructed through the registry and run on
real and synthetic data.
"""

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def registry():
    from tscore.registry import BlockRegistry, register_ts_blocks
    registry = BlockRegistry()
    register_ts_blocks(registry)
    return registry


@pytest.mark.integration
class TestScenarios:
    """Source, change, frequency, select and span behaviour."""

    def test_monthly_source_output(self, registry):
        """A monthly univariate source yields no id and strictly increasing months."""
        frame = registry.construct("ts_airpassenger_block").run()
        assert "id" not in frame.columns
        assert frame["time"].is_monotonic_increasing
        assert frame["time"].is_unique
        assert (frame["time"].dt.day == 1).all()
        gaps = frame["time"].diff().dropna().dt.days
        assert gaps.between(28, 31).all(), "Observations are one month apart"

    def test_year_on_year_change(self, registry, monthly_frame):
        """24 increasing months give 12 positive year-on-year changes."""
        block = registry.construct("ts_change_block", method="pcy")
        result = block.run(monthly_frame)
        assert len(result) == 24
        valid = result["value"].dropna()
        assert len(valid) == 12
        assert result["value"].iloc[:12].isna().all(), "First year has no comparison"
        assert (valid > 0).all()

    def test_daily_to_yearly_sum(self, registry, daily_frame):
        """Daily data summed to years gives one row per year with the year's total."""
        block = registry.construct("ts_frequency_block", to="year", aggregate="sum")
        result = block.run(daily_frame)
        expected = daily_frame.groupby(daily_frame["time"].dt.year)["value"].sum()
        assert list(result["time"]) == [pd.Timestamp("2019-01-01"), pd.Timestamp("2020-01-01")]
        assert np.allclose(result["value"], expected.to_numpy())

    def test_select_absent_series(self, registry, multi_frame):
        """Selecting names that are not upstream fails instead of inventing data."""
        from tscore.errors import ShapeValidationError
        block = registry.construct("ts_select_block", series=["x", "y"])
        with pytest.raises(ShapeValidationError):
            block.run(multi_frame)
        block.receive(multi_frame)
        assert block.output is None
        assert isinstance(block.error, ShapeValidationError)

    def test_span_start_after_end(self, registry):
        """A span with start after end is rejected."""
        from tscore.errors import InvalidOptionError
        with pytest.raises(InvalidOptionError):
            registry.construct("ts_span_block", start="2021-01-01", end="2020-01-01")
        block = registry.construct("ts_span_block", start="2020-01-01")
        with pytest.raises(InvalidOptionError):
            block.set_option("end", "2019-12-31")
        assert block.get("end") is None


@pytest.mark.integration
class TestDatasetWorkflows:
    """Longer chains on built-in datasets."""

    def test_decompose_airpassengers(self, registry):
        data = registry.construct("ts_airpassenger_block").run()
        trend = registry.construct("ts_decompose_block", component="trend").run(data)
        adjusted = registry.construct("ts_decompose_block").run(data)
        assert len(trend) == len(adjusted) == 144
        assert trend["value"].iloc[-1] > trend["value"].iloc[0]

    def test_hp_filter_on_quarterly_data(self, registry):
        data = registry.construct("ts_dataset_block", dataset="JohnsonJohnson").run()
        trend = registry.construct("ts_decompose_block", component="trend", method="hp_filter").run(data)
        remainder = registry.construct("ts_decompose_block", component="remainder", method="hp_filter").run(data)
        assert np.allclose(trend["value"] + remainder["value"], data["value"])

    def test_forecast_airpassengers(self, registry):
        data = registry.construct("ts_airpassenger_block").run()
        result = registry.construct("ts_forecast_block", horizon=24).run(data)
        assert len(result) == 24
        assert result["time"].iloc[0] == pd.Timestamp("1961-01-01")
        assert result["value"].notna().all()

    def test_pca_macrodata(self, registry):
        data = registry.construct("ts_dataset_block", dataset="macrodata").run()
        result = registry.construct("ts_pca_block", n_components=3).run(data)
        assert list(pd.unique(result["id"])) == ["PC1", "PC2", "PC3"]

    def test_select_then_wide(self, registry):
        data = registry.construct("ts_dataset_block", dataset="macrodata").run()
        picked = registry.construct("ts_select_block", series=["unemp", "realgdp"]).run(data)
        wide = registry.construct("ts_to_df_block", format="wide").run(picked)
        assert list(wide.columns) == ["time", "unemp", "realgdp"]

    def test_from_df_to_index(self, registry, wide_frame):
        long = registry.construct("ts_from_df_block").run(wide_frame)
        indexed = registry.construct("ts_scale_block", base="2021-01").run(long)
        first = indexed[indexed["time"] == pd.Timestamp("2021-01-01")]
        assert np.allclose(first["value"], 100.0)
