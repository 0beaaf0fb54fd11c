from tscore.calls import Operation, SymbolicCall
from tsblocks.base_block import TsBlock
from tsblocks.param_templates import int_param


class TsLagBlock(TsBlock):
    """
    Shifts time stamps by a number of periods.
    """

    @property
    def identifier(self):
        return "ts_lag_block"

    @property
    def block_name(self):
        return "Lag / Lead"

    @property
    def doc(self):
        return (
            "Shifts a time series in time."
            "\n\nPositive values lag (move observations later), negative values"
            "\nlead. The period length follows the detected frequency."
        )

    @property
    def params(self):
        return {
            **int_param("by", 1, -1000, 1000, doc="Number of periods to shift"),
        }

    @property
    def operations(self):
        return [Operation.LAG]

    def build_call(self, state, probe=None):
        return SymbolicCall.build(Operation.LAG, by=state["by"])

    def describe(self, state):
        by = state["by"]
        if by == 0:
            return "No shift applied (by = 0)"
        period_text = "period" if abs(by) == 1 else "periods"
        if by > 0:
            return f"Shifting data forward by {by} {period_text} (lag)"
        return f"Shifting data backward by {abs(by)} {period_text} (lead)"
