from tscore.calls import Operation, OutputKind, SymbolicCall
from tsblocks.base_block import TsBlock
from tsblocks.param_templates import method_param

FORMAT_OPERATIONS = {
    "long": Operation.TBL,
    "wide": Operation.WIDE,
}


class TsToDfBlock(TsBlock):
    """
    Converts series to a plain data frame, shown as a table.
    """

    @property
    def identifier(self):
        return "ts_to_df_block"

    @property
    def block_name(self):
        return "To Data Frame"

    @property
    def doc(self):
        return (
            "Converts time series to a data frame."
            "\n\nLong format keeps one row per observation (id, time, value);"
            "\nwide format has a time column and one column per series."
        )

    @property
    def params(self):
        return {
            **method_param(list(FORMAT_OPERATIONS), "long", param_name="format",
                           doc="Output layout"),
        }

    @property
    def operations(self):
        return list(FORMAT_OPERATIONS.values())

    @property
    def output_kind(self):
        return OutputKind.TABLE

    def build_call(self, state, probe=None):
        return SymbolicCall.build(FORMAT_OPERATIONS[state["format"]])

    def describe(self, state):
        if state["format"] == "wide":
            return "Converting to wide format: one column per series"
        return "Converting to long format: one row per observation"

    def data_info(self, frame):
        """Rows and series of the upstream data."""
        n_series = frame["id"].nunique() if "id" in frame.columns else 1
        return f"{len(frame)} rows, {n_series} series"
