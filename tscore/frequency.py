"""
Sampling granularity detection.

Blocks use the detected granularity to limit choices (no upsampling in the
frequency block), to compute year-over-year offsets and to pick slider step
sizes. Detection never fails: when the spacing of the timestamps is
ambiguous the configured fallback (month) is returned and a warning logged.
"""

import logging
from enum import Enum
from typing import List, Optional

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"

    @property
    def periods_per_year(self) -> int:
        return PERIODS_PER_YEAR[self]

    @property
    def step_days(self) -> int:
        return STEP_DAYS[self]

    @property
    def offset(self) -> pd.DateOffset:
        return OFFSETS[self]

    @property
    def resample_rule(self) -> str:
        return RESAMPLE_RULES[self]

    @property
    def label(self) -> str:
        return LABELS[self]


# Finest first
GRANULARITY_ORDER: List[Granularity] = [
    Granularity.DAY, Granularity.WEEK, Granularity.MONTH, Granularity.QUARTER, Granularity.YEAR,
]

PERIODS_PER_YEAR = {
    Granularity.DAY: 365,
    Granularity.WEEK: 52,
    Granularity.MONTH: 12,
    Granularity.QUARTER: 4,
    Granularity.YEAR: 1,
}

STEP_DAYS = {
    Granularity.DAY: 1,
    Granularity.WEEK: 7,
    Granularity.MONTH: 30,
    Granularity.QUARTER: 91,
    Granularity.YEAR: 365,
}

OFFSETS = {
    Granularity.DAY: pd.DateOffset(days=1),
    Granularity.WEEK: pd.DateOffset(weeks=1),
    Granularity.MONTH: pd.DateOffset(months=1),
    Granularity.QUARTER: pd.DateOffset(months=3),
    Granularity.YEAR: pd.DateOffset(years=1),
}

# Period-start labels
RESAMPLE_RULES = {
    Granularity.DAY: "D",
    Granularity.WEEK: "W-MON",
    Granularity.MONTH: "MS",
    Granularity.QUARTER: "QS",
    Granularity.YEAR: "YS",
}

LABELS = {
    Granularity.DAY: "Daily",
    Granularity.WEEK: "Weekly",
    Granularity.MONTH: "Monthly",
    Granularity.QUARTER: "Quarterly",
    Granularity.YEAR: "Yearly",
}

# Upper bound of the median spacing in days for each granularity
_SPACING_LIMITS = [
    (Granularity.DAY, 3.5),
    (Granularity.WEEK, 10.0),
    (Granularity.MONTH, 45.0),
    (Granularity.QUARTER, 135.0),
    (Granularity.YEAR, 500.0),
]


def _fallback_granularity(fallback: Optional[str]) -> Granularity:
    if fallback is None:
        from tscore.config_manager import get_config
        fallback = get_config().get("detection.fallback_granularity", "month")
    try:
        return Granularity(fallback)
    except ValueError:
        logger.warning(f"Invalid fallback granularity '{fallback}', using month")
        return Granularity.MONTH


def granularity_from_spacing(days: float) -> Optional[Granularity]:
    """Map a typical spacing between observations (in days) to a granularity."""
    if not np.isfinite(days) or days <= 0:
        return None
    for granularity, limit in _SPACING_LIMITS:
        if days <= limit:
            return granularity
    return None


def detect_granularity(times, fallback: Optional[str] = None) -> Granularity:
    """
    Detect the sampling granularity of a sequence of timestamps.

    Args:
        times: Timestamps of one series (any order)
        fallback: Granularity returned when detection fails; defaults to
            the configured ``detection.fallback_granularity``

    Returns:
        Detected granularity, or the fallback
    """
    try:
        index = pd.DatetimeIndex(pd.to_datetime(pd.Series(times).dropna().unique())).sort_values()
    except (ValueError, TypeError) as e:
        result = _fallback_granularity(fallback)
        logger.warning(f"Could not read timestamps ({e}), assuming {result.value} data")
        return result

    if len(index) < 2:
        result = _fallback_granularity(fallback)
        logger.warning(f"Too few observations to detect frequency, assuming {result.value} data")
        return result

    spacing = np.diff(index.values).astype("timedelta64[s]").astype(float) / 86400.0
    granularity = granularity_from_spacing(float(np.median(spacing)))
    if granularity is None:
        result = _fallback_granularity(fallback)
        logger.warning(f"Unrecognised spacing of {np.median(spacing):.1f} days, assuming {result.value} data")
        return result
    return granularity


def detect_frame_granularity(frame: pd.DataFrame, fallback: Optional[str] = None) -> Granularity:
    """Detect granularity from the first series of a long-format frame."""
    if "time" not in frame.columns:
        result = _fallback_granularity(fallback)
        logger.warning(f"No time column, assuming {result.value} data")
        return result
    if "id" in frame.columns and len(frame):
        first = frame["id"].iloc[0]
        return detect_granularity(frame.loc[frame["id"] == first, "time"], fallback)
    return detect_granularity(frame["time"], fallback)


def coarser_or_equal(granularity: Granularity) -> List[Granularity]:
    """Granularities reachable by aggregation, finest first."""
    return GRANULARITY_ORDER[GRANULARITY_ORDER.index(granularity):]


def is_finer(a: Granularity, b: Granularity) -> bool:
    """Whether ``a`` samples more often than ``b``."""
    return GRANULARITY_ORDER.index(a) < GRANULARITY_ORDER.index(b)
