from tscore.calls import Operation, SymbolicCall
from tsblocks.base_block import TsBlock
from tsblocks.param_templates import int_param


class TsForecastBlock(TsBlock):
    """
    Exponential smoothing forecast.
    """

    @property
    def identifier(self):
        return "ts_forecast_block"

    @property
    def block_name(self):
        return "Forecast"

    @property
    def doc(self):
        return (
            "Forecasts each series with exponential smoothing."
            "\n\nTrend and seasonal terms are added when the history is long"
            "\nenough. The output holds point forecasts only."
        )

    @property
    def params(self):
        return {
            **int_param("horizon", 12, 1, 100, doc="Number of periods to forecast"),
        }

    @property
    def operations(self):
        return [Operation.FORECAST]

    def build_call(self, state, probe=None):
        return SymbolicCall.build(Operation.FORECAST, h=state["horizon"])

    def describe(self, state):
        horizon = state["horizon"]
        suffix = "" if horizon == 1 else "s"
        return f"Forecasting {horizon} period{suffix} ahead using exponential smoothing"
