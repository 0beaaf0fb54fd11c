"""
Unit tests for the built-in datasets.
"""

import pandas as pd
import pytest


@pytest.mark.unit
class TestCsvDatasets:
    """Tests for the datasets shipped as CSV files."""

    def test_airpassengers(self):
        from tscore.datasets import load_dataset
        frame = load_dataset("AirPassengers")
        assert list(frame.columns) == ["time", "value"]
        assert len(frame) == 144
        assert frame["value"].iloc[0] == 112
        assert frame["value"].iloc[-1] == 432
        assert frame["time"].iloc[0] == pd.Timestamp("1949-01-01")
        assert frame["time"].is_monotonic_increasing

    def test_johnsonjohnson(self):
        from tscore.datasets import load_dataset
        frame = load_dataset("JohnsonJohnson")
        assert len(frame) == 84
        assert frame["time"].iloc[-1] == pd.Timestamp("1980-10-01")

    def test_loads_are_independent(self):
        from tscore.datasets import load_dataset
        first = load_dataset("AirPassengers")
        first.loc[0, "value"] = -1
        assert load_dataset("AirPassengers")["value"].iloc[0] == 112


@pytest.mark.unit
class TestBundledDatasets:
    """Tests for datasets read from statsmodels."""

    def test_nile(self):
        from tscore.datasets import load_dataset
        frame = load_dataset("Nile")
        assert len(frame) == 100
        assert frame["time"].iloc[0] == pd.Timestamp("1871-01-01")

    def test_macrodata_is_multivariate(self):
        from tscore.datasets import load_dataset
        frame = load_dataset("macrodata")
        assert list(frame.columns) == ["id", "time", "value"]
        assert list(pd.unique(frame["id"])) == ["realgdp", "realcons", "realinv", "unemp"]
        assert frame["time"].iloc[0] == pd.Timestamp("1959-01-01")

    @pytest.mark.parametrize("name", ["sunspot.year", "co2", "elnino"])
    def test_univariate(self, name):
        from tscore.datasets import load_dataset
        from tscore.toolbox import check_long
        frame = load_dataset(name)
        assert list(frame.columns) == ["time", "value"]
        check_long(frame)


@pytest.mark.unit
class TestCatalog:
    """Tests for dataset metadata."""

    def test_every_dataset_has_loader(self):
        from tscore.datasets import DATASETS
        from tscore.datasets.catalog import LOADERS
        assert set(DATASETS) == set(LOADERS)

    def test_label(self):
        from tscore.datasets import dataset_label
        assert dataset_label("Nile") == "Nile - River Nile flow (1871-1970)"

    def test_unknown_dataset(self):
        from tscore.datasets import load_dataset
        from tscore.errors import InvalidOptionError
        with pytest.raises(InvalidOptionError) as excinfo:
            load_dataset("iris")
        assert excinfo.value.option == "dataset"
