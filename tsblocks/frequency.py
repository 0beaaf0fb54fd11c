from tscore.calls import Operation, SymbolicCall
from tscore.frequency import Granularity, coarser_or_equal
from tscore.toolbox import AGGREGATES
from tsblocks.base_block import TsBlock
from tsblocks.param_templates import flag_param, granularity_param, method_param

AGGREGATE_DESCRIPTIONS = {
    "mean": "averaging",
    "sum": "summing",
    "first": "taking first value of",
    "last": "taking last value of",
    "min": "taking minimum of",
    "max": "taking maximum of",
}


class TsFrequencyBlock(TsBlock):
    """
    Converts series to a coarser sampling frequency.

    With upstream data in view only the current frequency and coarser ones
    are offered; a target that becomes unavailable falls back to 'year'.
    """

    @property
    def identifier(self):
        return "ts_frequency_block"

    @property
    def block_name(self):
        return "Frequency"

    @property
    def doc(self):
        return (
            "Changes the frequency of a time series."
            "\n\nEach period is labelled by its first day and summarised by the"
            "\nchosen aggregation. With 'remove missing' off, a period holding"
            "\na missing value is missing in the output."
        )

    @property
    def params(self):
        return {
            **granularity_param("to", "year", doc="Target frequency"),
            **method_param(list(AGGREGATES), "mean", param_name="aggregate",
                           doc="How values within a period are combined"),
            **flag_param("na_rm", True, doc="Remove missing values before aggregating"),
        }

    @property
    def operations(self):
        return [Operation.FREQUENCY]

    def constrain(self, probe):
        if probe is None or probe.granularity is None:
            return []
        allowed = [g.value for g in reversed(coarser_or_equal(probe.granularity))]
        return [("to", allowed, Granularity.YEAR.value)]

    def build_call(self, state, probe=None):
        return SymbolicCall.build(
            Operation.FREQUENCY,
            to=state["to"],
            aggregate=state["aggregate"],
            na_rm=state["na_rm"],
        )

    def describe(self, state):
        target = Granularity(state["to"]).label.lower()
        return f"Converting to {target} frequency by {AGGREGATE_DESCRIPTIONS[state['aggregate']]} each period"
