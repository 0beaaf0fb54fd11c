"""
Time series toolbox.

Operations on long-format series tables (columns ``id`` (optional), ``time``,
``value``). Multivariate tables are processed series by series. Every
function returns a new frame and leaves its input untouched.

Numerical work is delegated to pandas (resampling, shifting), statsmodels
(STL, Hodrick-Prescott, X-13, exponential smoothing) and scikit-learn (PCA).
"""

import logging
from typing import Callable, Dict, Iterable, Optional, Sequence

import numpy as np
import pandas as pd
from pandas.api.types import (
    is_datetime64_any_dtype, is_integer_dtype, is_numeric_dtype, is_object_dtype, is_string_dtype,
)

from tscore.errors import InvalidOptionError, ShapeValidationError
from tscore.frequency import Granularity, detect_granularity, is_finer
from tscore.inputs import Frame, Frames
from tscore.options import date_bounds

logger = logging.getLogger(__name__)

LONG_COLUMNS = ("id", "time", "value")

AGGREGATES = ("mean", "sum", "first", "last", "min", "max")

COMPONENTS = ("seasonal_adjusted", "trend", "seasonal", "remainder")

DECOMPOSITION_METHODS = ("stl", "x13", "hp_filter")

# Components each decomposition method can deliver
METHOD_COMPONENTS = {
    "stl": COMPONENTS,
    "x13": COMPONENTS,
    "hp_filter": ("trend", "remainder"),
}

TIME_COLUMN_NAMES = ("time", "date", "datetime", "timestamp", "period", "year", "month")


# ---------------------------------------------------------------------------
# Shape helpers
# ---------------------------------------------------------------------------

def check_long(frame: pd.DataFrame) -> pd.DataFrame:
    """
    Validate a long-format series table and return a normalized copy.

    The copy has a datetime ``time`` column, a float ``value`` column and a
    string ``id`` column when present.

    Raises:
        ShapeValidationError: if columns are missing or of the wrong type,
            or a series repeats a timestamp
    """
    if not isinstance(frame, pd.DataFrame):
        raise ShapeValidationError(f"Expected a data frame, got {type(frame).__name__}")
    columns = set(map(str, frame.columns))
    missing = {"time", "value"} - columns
    if missing:
        raise ShapeValidationError(
            f"Expected long-format series with columns [id], time, value; missing {sorted(missing)}")
    extra = columns - set(LONG_COLUMNS)
    if extra:
        raise ShapeValidationError(
            f"Unexpected columns {sorted(extra)} in long-format series; convert wide data first")

    out = frame.copy()
    try:
        out["time"] = pd.to_datetime(out["time"])
    except (ValueError, TypeError) as e:
        raise ShapeValidationError(f"Column 'time' does not hold dates: {e}") from e
    if not is_numeric_dtype(out["value"]):
        try:
            out["value"] = pd.to_numeric(out["value"])
        except (ValueError, TypeError) as e:
            raise ShapeValidationError(f"Column 'value' is not numeric: {e}") from e
    out["value"] = out["value"].astype(float)

    keys = ["time"]
    if "id" in out.columns:
        out["id"] = out["id"].astype(str)
        keys = ["id", "time"]
    if out.duplicated(keys).any():
        raise ShapeValidationError("Time stamps must be unique within each series")
    return out


def order_long(frame: pd.DataFrame, series_order: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """Sort by series (first appearance, or ``series_order``) then time."""
    columns = [c for c in LONG_COLUMNS if c in frame.columns]
    frame = frame[columns]
    if "id" in frame.columns:
        categories = list(series_order) if series_order is not None else list(pd.unique(frame["id"]))
        key = pd.Categorical(frame["id"], categories=categories, ordered=True)
        frame = frame.assign(_order=key).sort_values(["_order", "time"], kind="stable")
        frame = frame.drop(columns="_order")
    else:
        frame = frame.sort_values("time", kind="stable")
    return frame.reset_index(drop=True)


def per_series(frame: pd.DataFrame, fn: Callable[[pd.DataFrame], pd.DataFrame]) -> pd.DataFrame:
    """
    Apply ``fn`` to each series of a long-format table.

    ``fn`` receives a time-sorted frame with columns time and value and
    returns a frame with the same columns.
    """
    frame = check_long(frame)
    if "id" not in frame.columns:
        return order_long(fn(frame.sort_values("time").reset_index(drop=True)))

    parts = []
    for series_id, group in frame.groupby("id", sort=False):
        part = fn(group.drop(columns="id").sort_values("time").reset_index(drop=True))
        part.insert(0, "id", series_id)
        parts.append(part)
    if not parts:
        return order_long(frame)
    return order_long(pd.concat(parts, ignore_index=True))


def _indexed(part: pd.DataFrame) -> pd.Series:
    return pd.Series(part["value"].to_numpy(dtype=float), index=pd.DatetimeIndex(part["time"]))


def _year_ago(part: pd.DataFrame) -> np.ndarray:
    """
    Value observed about one calendar year before each time stamp.

    The closest observation within half a sampling step of the date a year
    earlier counts, so weekly data lines up with the same week of the
    previous year. NaN where there is none.
    """
    series = _indexed(part)
    if len(series) < 2:
        return np.full(len(series), np.nan)
    tolerance = pd.Timedelta(days=detect_granularity(part["time"]).step_days / 2)
    target = series.index - pd.DateOffset(years=1)
    return series.reindex(target, method="nearest", tolerance=tolerance).to_numpy()


def _with_values(part: pd.DataFrame, values) -> pd.DataFrame:
    out = part.copy()
    out["value"] = np.asarray(values, dtype=float)
    return out


def pivot_wide(frame: pd.DataFrame) -> pd.DataFrame:
    """Long to wide with time as index and one column per series."""
    wide = frame.pivot(index="time", columns="id", values="value")
    wide = wide[list(pd.unique(frame["id"]))]
    wide.columns.name = None
    return wide


# ---------------------------------------------------------------------------
# Identity, conversion and combination
# ---------------------------------------------------------------------------

def identity(frame: pd.DataFrame) -> pd.DataFrame:
    return frame.copy()


def ts_tbl(frame: pd.DataFrame) -> pd.DataFrame:
    """Normalized long format."""
    return order_long(check_long(frame))


def ts_wide(frame: pd.DataFrame) -> pd.DataFrame:
    """Wide format: a time column plus one column per series."""
    frame = check_long(frame)
    if "id" not in frame.columns:
        return order_long(frame)
    return pivot_wide(frame).reset_index()


def _as_datetime(column: pd.Series) -> pd.Series:
    if is_integer_dtype(column) and column.between(1000, 3000).all():
        return pd.to_datetime(column.astype(str), format="%Y")
    return pd.to_datetime(column)


def find_time_column(frame: pd.DataFrame) -> Optional[str]:
    """
    Locate the column holding time stamps in a wide frame.

    Datetime columns win, then columns with a time-like name, then the
    first text column that parses as dates.
    """
    for column in frame.columns:
        if is_datetime64_any_dtype(frame[column]):
            return column
    for column in frame.columns:
        if str(column).lower() in TIME_COLUMN_NAMES:
            try:
                _as_datetime(frame[column])
                return column
            except (ValueError, TypeError):
                continue
    for column in frame.columns:
        if is_object_dtype(frame[column]) or is_string_dtype(frame[column]):
            try:
                pd.to_datetime(frame[column])
                return column
            except (ValueError, TypeError):
                continue
    return None


def ts_long(frame: pd.DataFrame) -> pd.DataFrame:
    """
    Wide to long format.

    The time column is detected automatically and every other numeric
    column becomes one series named after the column.

    Raises:
        ShapeValidationError: if there is no time column or no numeric column
    """
    if not isinstance(frame, pd.DataFrame):
        raise ShapeValidationError(f"Expected a data frame, got {type(frame).__name__}")
    columns = set(map(str, frame.columns))
    if {"time", "value"} <= columns <= set(LONG_COLUMNS):
        return ts_tbl(frame)

    time_column = find_time_column(frame)
    if time_column is None:
        raise ShapeValidationError("No time column found; expected a date or datetime column")
    value_columns = [c for c in frame.columns
                     if c != time_column and is_numeric_dtype(frame[c]) and not is_datetime64_any_dtype(frame[c])]
    if not value_columns:
        raise ShapeValidationError("No numeric columns to convert into series")

    wide = frame[[time_column] + value_columns].copy()
    wide[time_column] = _as_datetime(wide[time_column])
    wide = wide.rename(columns={time_column: "time"})
    long = wide.melt(id_vars="time", var_name="id", value_name="value")
    long["id"] = long["id"].astype(str)
    return order_long(check_long(long), [str(c) for c in value_columns])


def ts_c(data) -> pd.DataFrame:
    """
    Combine several series tables into one multivariate table.

    Inputs without an ``id`` column are named after their mapping key, or
    ``series1``, ``series2`` and so on. A named input holding a single series
    takes the name as id. Clashing ids get a numeric suffix.
    """
    if isinstance(data, Frame):
        return ts_tbl(data.data)
    if isinstance(data, pd.DataFrame):
        return ts_tbl(data)
    if not isinstance(data, Frames):
        data = Frames(tuple(data))

    parts = []
    used = set()
    order = []
    for position, (name, frame) in enumerate(data.named(), start=1):
        frame = check_long(frame)
        if "id" not in frame.columns:
            frame.insert(0, "id", name or f"series{position}")
        elif name and frame["id"].nunique() == 1:
            frame["id"] = name

        renames = {}
        for series_id in pd.unique(frame["id"]):
            unique_id = series_id
            suffix = 2
            while unique_id in used:
                unique_id = f"{series_id}_{suffix}"
                suffix += 1
            used.add(unique_id)
            order.append(unique_id)
            renames[series_id] = unique_id
        frame["id"] = frame["id"].map(renames)
        parts.append(frame)

    combined = pd.concat(parts, ignore_index=True)
    return order_long(combined, order)


def ts_pick(frame: pd.DataFrame, series: Iterable[str]) -> pd.DataFrame:
    """
    Keep the named series, in the requested order.

    Raises:
        ShapeValidationError: if the data is univariate or a name is absent
    """
    frame = check_long(frame)
    if "id" not in frame.columns:
        raise ShapeValidationError("Series selection needs multivariate data with an 'id' column")
    series = [str(s) for s in series]
    available = list(pd.unique(frame["id"]))
    missing = [s for s in series if s not in available]
    if missing:
        raise ShapeValidationError(f"Series {missing} not found; available: {available}")
    return order_long(frame[frame["id"].isin(series)], series)


# ---------------------------------------------------------------------------
# Changes
# ---------------------------------------------------------------------------

def ts_pc(frame: pd.DataFrame) -> pd.DataFrame:
    """Period-on-period percentage change."""
    def _pc(part):
        values = part["value"]
        return _with_values(part, (values / values.shift(1) - 1) * 100)
    return per_series(frame, _pc)


def ts_pcy(frame: pd.DataFrame) -> pd.DataFrame:
    """Year-on-year percentage change."""
    def _pcy(part):
        return _with_values(part, (part["value"].to_numpy() / _year_ago(part) - 1) * 100)
    return per_series(frame, _pcy)


def ts_pca(frame: pd.DataFrame) -> pd.DataFrame:
    """Period-on-period change, annualized by compounding."""
    def _pca(part):
        periods = detect_granularity(part["time"]).periods_per_year
        values = part["value"]
        return _with_values(part, ((values / values.shift(1)) ** periods - 1) * 100)
    return per_series(frame, _pca)


def ts_diff(frame: pd.DataFrame) -> pd.DataFrame:
    """First differences."""
    def _diff(part):
        return _with_values(part, part["value"].diff())
    return per_series(frame, _diff)


def ts_diffy(frame: pd.DataFrame) -> pd.DataFrame:
    """Difference to the same period of the previous year."""
    def _diffy(part):
        return _with_values(part, part["value"].to_numpy() - _year_ago(part))
    return per_series(frame, _diffy)


# ---------------------------------------------------------------------------
# Frequency, shifting and filtering
# ---------------------------------------------------------------------------

def _aggregate(values: pd.Series, how: str, na_rm: bool) -> float:
    if not na_rm and values.isna().any():
        return np.nan
    values = values.dropna()
    if values.empty:
        return np.nan
    if how == "first":
        return float(values.iloc[0])
    if how == "last":
        return float(values.iloc[-1])
    return float(getattr(values, how)())


def ts_frequency(frame: pd.DataFrame, to: str, aggregate: str = "mean", na_rm: bool = True) -> pd.DataFrame:
    """
    Convert series to another granularity.

    Aggregation labels each period by its first day. Converting to a finer
    granularity interpolates linearly in time.
    """
    target = Granularity(to)
    if aggregate not in AGGREGATES:
        raise InvalidOptionError(f"Unknown aggregation '{aggregate}'", option="aggregate")

    def _convert(part):
        source = detect_granularity(part["time"])
        series = _indexed(part)
        if is_finer(target, source):
            logger.debug(f"Disaggregating {source.value} data to {target.value}")
            result = series.resample(target.resample_rule).asfreq().interpolate(method="time")
        else:
            resampler = series.resample(target.resample_rule, label="left", closed="left")
            counts = resampler.size()
            result = resampler.apply(lambda values: _aggregate(values, aggregate, na_rm))
            result = result[counts > 0]
        return pd.DataFrame({"time": result.index, "value": result.to_numpy(dtype=float)})

    return per_series(frame, _convert)


def ts_lag(frame: pd.DataFrame, by: int = 1) -> pd.DataFrame:
    """Shift time stamps by ``by`` periods; negative values lead."""
    by = int(by)

    def _lag(part):
        if by == 0:
            return part.copy()
        offset = detect_granularity(part["time"]).offset
        out = part.copy()
        out["time"] = pd.DatetimeIndex(part["time"]) + offset * by
        return out

    return per_series(frame, _lag)


def ts_span(frame: pd.DataFrame, start=None, end=None) -> pd.DataFrame:
    """Keep observations between ``start`` and ``end`` (inclusive, partial dates allowed)."""
    frame = check_long(frame)
    mask = pd.Series(True, index=frame.index)
    lower = upper = None
    if start is not None:
        lower = date_bounds(start)[0]
        mask &= frame["time"] >= lower
    if end is not None:
        upper = date_bounds(end)[1]
        mask &= frame["time"] <= upper
    if lower is not None and upper is not None and lower > upper:
        raise InvalidOptionError(f"Span start {start} is after end {end}", option="start")
    return order_long(frame[mask])


# ---------------------------------------------------------------------------
# Scaling
# ---------------------------------------------------------------------------

def ts_index(frame: pd.DataFrame, base=None) -> pd.DataFrame:
    """
    Index series to 100.

    The reference is the mean over the base period (a partial date such as
    '2020' covers the whole year) or, without a base, the first observation.
    """
    if base is not None:
        lower, upper = date_bounds(base)

    def _index(part):
        values = part["value"]
        if base is None:
            reference = values.dropna()
            if reference.empty:
                raise ShapeValidationError("Cannot index a series without observations")
            reference_value = reference.iloc[0]
        else:
            in_base = values[(part["time"] >= lower) & (part["time"] <= upper)].dropna()
            if in_base.empty:
                raise ShapeValidationError(f"No observations in base period {base}")
            reference_value = in_base.mean()
        if reference_value == 0:
            raise ValueError("Base value is zero, index is undefined")
        return _with_values(part, values / reference_value * 100)

    return per_series(frame, _index)


def ts_scale(frame: pd.DataFrame) -> pd.DataFrame:
    """Standardize each series to mean 0 and standard deviation 1."""
    def _scale(part):
        values = part["value"]
        return _with_values(part, (values - values.mean()) / values.std())
    return per_series(frame, _scale)


def ts_minmax(frame: pd.DataFrame) -> pd.DataFrame:
    """Rescale all values to [0, 1] using the overall minimum and maximum."""
    frame = check_long(frame)
    low, high = frame["value"].min(), frame["value"].max()
    out = frame.copy()
    out["value"] = (frame["value"] - low) / (high - low)
    return order_long(out)


# ---------------------------------------------------------------------------
# Decomposition and forecasting
# ---------------------------------------------------------------------------

def hp_lambda(granularity: Granularity) -> float:
    """Smoothing parameter scaled from the quarterly 1600."""
    return 1600.0 * (granularity.periods_per_year / 4.0) ** 2


def _decompose(part: pd.DataFrame, method: str) -> Dict[str, pd.Series]:
    granularity = detect_granularity(part["time"])
    period = granularity.periods_per_year
    observed = part["value"].dropna()
    if observed.empty:
        raise ShapeValidationError("Cannot decompose a series without observations")

    if method == "stl":
        from statsmodels.tsa.seasonal import STL
        if period < 2:
            raise ValueError(f"STL needs a seasonal period; {granularity.value} data has none")
        result = STL(observed.to_numpy(), period=period, robust=True).fit()
        trend = pd.Series(np.asarray(result.trend), index=observed.index)
        seasonal = pd.Series(np.asarray(result.seasonal), index=observed.index)
        remainder = pd.Series(np.asarray(result.resid), index=observed.index)
        return {
            "seasonal_adjusted": observed - seasonal,
            "trend": trend,
            "seasonal": seasonal,
            "remainder": remainder,
        }

    if method == "hp_filter":
        from statsmodels.tsa.filters.hp_filter import hpfilter
        cycle, trend = hpfilter(observed.to_numpy(), lamb=hp_lambda(granularity))
        return {
            "trend": pd.Series(np.asarray(trend), index=observed.index),
            "remainder": pd.Series(np.asarray(cycle), index=observed.index),
        }

    if method == "x13":
        from statsmodels.tsa.x13 import x13_arima_analysis
        dated = pd.Series(observed.to_numpy(), index=pd.DatetimeIndex(part.loc[observed.index, "time"]))
        dated.index.freq = pd.infer_freq(dated.index)
        result = x13_arima_analysis(dated)
        seasadj = pd.Series(np.asarray(result.seasadj), index=observed.index)
        return {
            "seasonal_adjusted": seasadj,
            "trend": pd.Series(np.asarray(result.trend), index=observed.index),
            "seasonal": observed - seasadj,
            "remainder": pd.Series(np.asarray(result.irregular), index=observed.index),
        }

    raise InvalidOptionError(f"Unknown decomposition method '{method}'", option="method")


def ts_decompose(frame: pd.DataFrame, component: str, method: str = "stl") -> pd.DataFrame:
    """Extract one component of a seasonal decomposition."""
    if component not in METHOD_COMPONENTS.get(method, ()):
        raise InvalidOptionError(f"Method '{method}' does not provide the '{component}' component",
                                 option="component")

    def _component(part):
        values = _decompose(part, method)[component]
        out = part.copy()
        out["value"] = np.nan
        out.loc[values.index, "value"] = values.to_numpy(dtype=float)
        return out

    return per_series(frame, _component)


def ts_forecast(frame: pd.DataFrame, h: int = 12) -> pd.DataFrame:
    """
    Point forecasts ``h`` periods ahead by exponential smoothing.

    A seasonal term is used when at least two full years are observed and a
    trend term when there are ten or more observations.
    """
    from statsmodels.tsa.holtwinters import ExponentialSmoothing

    h = int(h)
    if h < 1:
        raise InvalidOptionError(f"Forecast horizon must be at least 1, got {h}", option="horizon")

    def _forecast(part):
        granularity = detect_granularity(part["time"])
        observed = part["value"].dropna()
        if len(observed) < 2:
            raise ShapeValidationError("At least two observations are needed to forecast")
        period = granularity.periods_per_year
        seasonal = "add" if period > 1 and len(observed) >= 2 * period else None
        trend = "add" if len(observed) >= 10 else None
        model = ExponentialSmoothing(
            observed.to_numpy(dtype=float),
            trend=trend,
            seasonal=seasonal,
            seasonal_periods=period if seasonal else None,
            initialization_method="estimated",
        ).fit()
        forecast = np.asarray(model.forecast(h), dtype=float)
        last = pd.Timestamp(part["time"].iloc[-1])
        times = pd.DatetimeIndex([last + granularity.offset * step for step in range(1, h + 1)])
        return pd.DataFrame({"time": times, "value": forecast})

    return per_series(frame, _forecast)


def ts_prcomp(frame: pd.DataFrame, n_components: int = 2, standardize: bool = True) -> pd.DataFrame:
    """
    Principal components of a multivariate table.

    Only time stamps where every series is observed are used. Components are
    returned as series PC1, PC2, and so on.
    """
    from sklearn.decomposition import PCA
    from sklearn.preprocessing import StandardScaler

    frame = check_long(frame)
    if "id" not in frame.columns:
        raise ShapeValidationError("PCA needs multivariate data with an 'id' column")
    wide = pivot_wide(frame).dropna()
    if wide.shape[1] < 2:
        raise ShapeValidationError("PCA needs at least two series")
    if wide.shape[0] < 2:
        raise ShapeValidationError("PCA needs at least two complete observations")

    matrix = wide.to_numpy(dtype=float)
    if standardize:
        matrix = StandardScaler().fit_transform(matrix)
    k = min(int(n_components), matrix.shape[1], matrix.shape[0])
    scores = PCA(n_components=k).fit_transform(matrix)

    names = [f"PC{i + 1}" for i in range(k)]
    components = pd.DataFrame(scores, index=wide.index, columns=names)
    components.index.name = "time"
    long = components.reset_index().melt(id_vars="time", var_name="id", value_name="value")
    return order_long(long, names)
