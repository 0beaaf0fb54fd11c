from tscore.calls import Operation, SymbolicCall
from tscore.errors import InvalidOptionError
from tscore.options import date_bounds
from tsblocks.base_block import TsBlock
from tsblocks.param_templates import date_param


class TsSpanBlock(TsBlock):
    """
    Restricts series to a date range.

    Bounds may be partial dates: a start of '2020' includes all of 2020, an
    end of '2020-06' includes all of June 2020.
    """

    @property
    def identifier(self):
        return "ts_span_block"

    @property
    def block_name(self):
        return "Span"

    @property
    def doc(self):
        return (
            "Filters a time series to a date range."
            "\n\nLeave start or end empty for an open range."
        )

    @property
    def params(self):
        return {
            **date_param("start", doc="First date to keep (e.g. '2020', '2020-01')"),
            **date_param("end", doc="Last date to keep"),
        }

    @property
    def operations(self):
        return [Operation.SPAN, Operation.IDENTITY]

    def validate_state(self, state):
        start, end = state["start"], state["end"]
        if start is None or end is None:
            return
        if date_bounds(start)[0] > date_bounds(end)[1]:
            raise InvalidOptionError(f"Start {start} is after end {end}", option="start")

    def build_call(self, state, probe=None):
        start, end = state["start"], state["end"]
        if start is None and end is None:
            return SymbolicCall.build(Operation.IDENTITY)
        return SymbolicCall.build(Operation.SPAN, start=start, end=end)

    def describe(self, state):
        start, end = state["start"], state["end"]
        if start is None and end is None:
            return "No filtering applied - showing full time range"
        if start is not None and end is not None:
            return f"Filtering data from {start} to {end}"
        if start is not None:
            return f"Filtering data from {start} onwards"
        return f"Filtering data up to {end}"
