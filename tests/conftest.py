"""
Pytest configuration and shared fixtures for tsblocks tests.
"""

import os
import sys
from pathlib import Path

# Add parent directory to path so we can import tsblocks modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import numpy as np
import pandas as pd
import pytest


# Need a QApplication instance for PyQt tests
@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests that need Qt."""
    from PyQt5.QtWidgets import QApplication
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app


@pytest.fixture
def monthly_frame():
    """24 months of steadily increasing univariate data, 2020-2021."""
    times = pd.date_range("2020-01-01", periods=24, freq="MS")
    return pd.DataFrame({"time": times, "value": np.arange(1.0, 25.0) * 10})


@pytest.fixture
def seasonal_frame():
    """Five years of monthly data with trend and yearly seasonality."""
    times = pd.date_range("2015-01-01", periods=60, freq="MS")
    t = np.arange(60)
    values = 100 + 0.5 * t + 10 * np.sin(2 * np.pi * t / 12)
    return pd.DataFrame({"time": times, "value": values})


@pytest.fixture
def multi_frame():
    """Three monthly series 'a', 'b', 'c' over three years."""
    times = pd.date_range("2019-01-01", periods=36, freq="MS")
    rng = np.random.default_rng(42)
    parts = []
    for i, name in enumerate(["a", "b", "c"]):
        values = 50 + 10 * i + np.cumsum(rng.normal(0, 1, len(times)))
        parts.append(pd.DataFrame({"id": name, "time": times, "value": values}))
    return pd.concat(parts, ignore_index=True)


@pytest.fixture
def daily_frame():
    """Daily values over 2019 and 2020."""
    times = pd.date_range("2019-01-01", "2020-12-31", freq="D")
    return pd.DataFrame({"time": times, "value": np.arange(len(times), dtype=float) % 7 + 1})


@pytest.fixture
def wide_frame():
    """Wide table with a date column and two numeric columns."""
    return pd.DataFrame({
        "date": pd.date_range("2021-01-01", periods=6, freq="MS"),
        "sales": [10.0, 12.0, 11.0, 13.0, 15.0, 14.0],
        "costs": [8.0, 9.0, 9.5, 10.0, 11.0, 10.5],
        "region": ["north"] * 6,
    })
