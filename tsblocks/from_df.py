import logging

from pandas.api.types import is_numeric_dtype

from tscore.calls import Operation, SymbolicCall
from tscore.errors import ShapeValidationError
from tscore.inputs import Frame
from tscore.toolbox import find_time_column
from tsblocks.base_block import TsBlock

logger = logging.getLogger(__name__)


class TsFromDfBlock(TsBlock):
    """
    Converts a wide data frame into long-format series.
    """

    @property
    def identifier(self):
        return "ts_from_df_block"

    @property
    def block_name(self):
        return "From Data Frame"

    @property
    def doc(self):
        return (
            "Converts a data frame to time series format."
            "\n\nThe time column is detected automatically; every numeric"
            "\ncolumn becomes one series named after the column."
        )

    @property
    def params(self):
        return {}

    @property
    def operations(self):
        return [Operation.LONG]

    def validate_input(self, data, state):
        if not isinstance(data, Frame):
            raise ShapeValidationError("From Data Frame needs a single upstream data frame")
        frame = data.data
        time_column = find_time_column(frame)
        if time_column is None:
            raise ShapeValidationError("No time column found; expected a date or datetime column")
        logger.debug(f"From Data Frame: using '{time_column}' as time column")
        if not any(is_numeric_dtype(frame[c]) for c in frame.columns if c != time_column):
            raise ShapeValidationError("No numeric columns to convert into series")

    def build_call(self, state, probe=None):
        return SymbolicCall.build(Operation.LONG)

    def conversion_info(self, frame):
        """Summary shown under the form, e.g. "Time column 'date', 3 series"."""
        time_column = find_time_column(frame)
        if time_column is None:
            return "No time column found"
        n_series = sum(1 for c in frame.columns if c != time_column and is_numeric_dtype(frame[c]))
        return f"Time column '{time_column}', {n_series} series"
