from tscore.calls import Operation, SymbolicCall
from tsblocks.base_block import TsBlock
from tsblocks.param_templates import date_param, method_param

METHOD_OPERATIONS = {
    "index": Operation.INDEX,
    "normalize": Operation.SCALE,
    "minmax": Operation.MINMAX,
}


class TsScaleBlock(TsBlock):
    """
    Index, standardize or min-max scale series.
    """

    @property
    def identifier(self):
        return "ts_scale_block"

    @property
    def block_name(self):
        return "Scale / Index"

    @property
    def doc(self):
        return (
            "Rescales time series."
            "\n\nMethods:"
            "\n- index: 100 at the base period (mean over the period for"
            "\n  partial dates such as '2020'); first observation if no base"
            "\n- normalize: mean 0, standard deviation 1 per series"
            "\n- minmax: all values to [0, 1]"
        )

    @property
    def params(self):
        return {
            **method_param(list(METHOD_OPERATIONS), "index", doc="Scaling method"),
            **date_param("base", doc="Base period set to 100 (index only)"),
        }

    @property
    def operations(self):
        return list(METHOD_OPERATIONS.values())

    def build_call(self, state, probe=None):
        method = state["method"]
        if method == "index":
            return SymbolicCall.build(Operation.INDEX, base=state["base"])
        return SymbolicCall.build(METHOD_OPERATIONS[method])

    def describe(self, state):
        method = state["method"]
        if method == "normalize":
            return "Standardizes data to mean = 0, SD = 1"
        if method == "minmax":
            return "Scales data to range [0, 1]"
        if state["base"] is not None:
            return f"Creates index with {state['base']} = 100"
        return "Creates index with the first observation = 100"
