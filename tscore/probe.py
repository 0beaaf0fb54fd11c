"""
Shape probe of upstream data.

A probe summarises what a block may need to know about its input before
building a call: which columns exist, which series are present, the detected
granularity and the covered time range. It only narrows option choices; it
never changes what an option means.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import pandas as pd

from tscore.frequency import Granularity, detect_frame_granularity
from tscore.inputs import Frame, Input

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataProbe:
    columns: Tuple[str, ...]
    series: Tuple[str, ...]
    granularity: Optional[Granularity]
    time_min: Optional[pd.Timestamp]
    time_max: Optional[pd.Timestamp]
    n_rows: int

    @property
    def has_id(self) -> bool:
        return "id" in self.columns

    @property
    def is_multivariate(self) -> bool:
        return self.has_id and len(self.series) > 0

    @property
    def step_days(self) -> int:
        """Slider step for date pickers over this data."""
        return (self.granularity or Granularity.MONTH).step_days

    @property
    def midpoint(self) -> Optional[pd.Timestamp]:
        if self.time_min is None or self.time_max is None:
            return None
        return self.time_min + (self.time_max - self.time_min) / 2


def probe_input(data: Input) -> Optional[DataProbe]:
    """Probe a single-frame input; other inputs yield None."""
    if not isinstance(data, Frame):
        return None
    frame = data.data
    columns = tuple(str(c) for c in frame.columns)

    series: Tuple[str, ...] = ()
    if "id" in frame.columns:
        series = tuple(str(s) for s in pd.unique(frame["id"].dropna()))

    granularity = None
    time_min = time_max = None
    if "time" in frame.columns and len(frame):
        try:
            times = pd.to_datetime(frame["time"])
            time_min, time_max = times.min(), times.max()
        except (ValueError, TypeError) as e:
            logger.warning(f"Could not read time range: {e}")
        granularity = detect_frame_granularity(frame)

    return DataProbe(
        columns=columns,
        series=series,
        granularity=granularity,
        time_min=time_min,
        time_max=time_max,
        n_rows=len(frame),
    )
