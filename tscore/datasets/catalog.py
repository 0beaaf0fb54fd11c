"""
Built-in example time series.

Small classic datasets ship as CSV files next to this module; the others
come from the datasets bundled with statsmodels, so loading never touches
the network. Univariate datasets load as (time, value), multivariate ones
as (id, time, value).
"""

import logging
import os
from typing import Callable, Dict, List

import pandas as pd

from tscore.errors import InvalidOptionError

logger = logging.getLogger(__name__)

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")

MACRO_SERIES = ["realgdp", "realcons", "realinv", "unemp"]
MONTHS = ["JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC"]

# desc, type (univariate/multivariate), freq (periods per year), series
DATASETS: Dict[str, Dict] = {
    "AirPassengers": {
        "desc": "Monthly airline passengers (1949-1960)",
        "type": "univariate",
        "freq": 12,
        "series": 1,
    },
    "JohnsonJohnson": {
        "desc": "Quarterly J&J earnings per share",
        "type": "univariate",
        "freq": 4,
        "series": 1,
    },
    "Nile": {
        "desc": "River Nile flow (1871-1970)",
        "type": "univariate",
        "freq": 1,
        "series": 1,
    },
    "sunspot.year": {
        "desc": "Yearly sunspot numbers (1700-2008)",
        "type": "univariate",
        "freq": 1,
        "series": 1,
    },
    "co2": {
        "desc": "Mauna Loa CO2 concentration, monthly means",
        "type": "univariate",
        "freq": 12,
        "series": 1,
    },
    "elnino": {
        "desc": "El Nino sea surface temperature (1950-2010)",
        "type": "univariate",
        "freq": 12,
        "series": 1,
    },
    "macrodata": {
        "desc": "US macroeconomic indicators (GDP, consumption, investment, unemployment)",
        "type": "multivariate",
        "freq": 4,
        "series": len(MACRO_SERIES),
    },
}


def dataset_names() -> List[str]:
    return list(DATASETS)


def dataset_label(name: str) -> str:
    """Dropdown label, e.g. 'Nile - River Nile flow (1871-1970)'."""
    return f"{name} - {DATASETS[name]['desc']}"


def _years(values: pd.Series) -> pd.DatetimeIndex:
    return pd.to_datetime(values.astype(int).astype(str), format="%Y")


def _univariate(times, values) -> pd.DataFrame:
    frame = pd.DataFrame({"time": pd.DatetimeIndex(times), "value": pd.Series(values).to_numpy(dtype=float)})
    return frame.sort_values("time").reset_index(drop=True)


def _read_csv(name: str) -> pd.DataFrame:
    frame = pd.read_csv(os.path.join(DATA_DIR, f"{name}.csv"), parse_dates=["time"])
    return _univariate(frame["time"], frame["value"])


def _nile() -> pd.DataFrame:
    from statsmodels.datasets import nile
    data = nile.load_pandas().data
    return _univariate(_years(data["year"]), data["volume"])


def _sunspots() -> pd.DataFrame:
    from statsmodels.datasets import sunspots
    data = sunspots.load_pandas().data
    return _univariate(_years(data["YEAR"]), data["SUNACTIVITY"])


def _co2() -> pd.DataFrame:
    from statsmodels.datasets import co2
    data = co2.load_pandas().data
    weekly = pd.Series(data["co2"].to_numpy(dtype=float), index=pd.DatetimeIndex(data.index))
    monthly = weekly.resample("MS").mean().dropna()
    return _univariate(monthly.index, monthly)


def _elnino() -> pd.DataFrame:
    from statsmodels.datasets import elnino
    data = elnino.load_pandas().data
    long = data.melt(id_vars="YEAR", value_vars=MONTHS, var_name="month", value_name="value")
    month = long["month"].map({m: i + 1 for i, m in enumerate(MONTHS)})
    times = pd.to_datetime(pd.DataFrame({"year": long["YEAR"].astype(int), "month": month, "day": 1}))
    return _univariate(times, long["value"])


def _macrodata() -> pd.DataFrame:
    from statsmodels.datasets import macrodata
    data = macrodata.load_pandas().data
    times = pd.to_datetime(pd.DataFrame({
        "year": data["year"].astype(int),
        "month": (data["quarter"].astype(int) - 1) * 3 + 1,
        "day": 1,
    }))
    wide = data[MACRO_SERIES].copy()
    wide.insert(0, "time", times)
    long = wide.melt(id_vars="time", var_name="id", value_name="value")
    long["value"] = long["value"].astype(float)
    return long[["id", "time", "value"]].reset_index(drop=True)


LOADERS: Dict[str, Callable[[], pd.DataFrame]] = {
    "AirPassengers": lambda: _read_csv("AirPassengers"),
    "JohnsonJohnson": lambda: _read_csv("JohnsonJohnson"),
    "Nile": _nile,
    "sunspot.year": _sunspots,
    "co2": _co2,
    "elnino": _elnino,
    "macrodata": _macrodata,
}


def load_dataset(name: str) -> pd.DataFrame:
    """
    Load a built-in dataset as a long-format series table.

    Raises:
        InvalidOptionError: if the name is not in the catalog
    """
    if name not in LOADERS:
        raise InvalidOptionError(f"Unknown dataset '{name}', available: {dataset_names()}", option="dataset")
    logger.debug(f"Loading dataset {name}")
    return LOADERS[name]()
