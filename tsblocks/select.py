from tscore.calls import Operation, SymbolicCall
from tsblocks.base_block import TsBlock
from tsblocks.param_templates import flag_param


class TsSelectBlock(TsBlock):
    """
    Picks series from multivariate data by name.
    """

    @property
    def identifier(self):
        return "ts_select_block"

    @property
    def block_name(self):
        return "Select"

    @property
    def doc(self):
        return (
            "Selects series from multivariate data."
            "\n\nLeave the selection empty to keep every series. Univariate"
            "\ndata passes through unchanged. Names that are not in the"
            "\nupstream data are reported as an error."
        )

    @property
    def params(self):
        return {
            "series": {
                "type": "list",
                "default": None,
                "nullable": True,
                "doc": "Series to keep, in this order (empty keeps all)"
            },
            **flag_param("multiple", True, doc="Allow selecting more than one series"),
        }

    @property
    def operations(self):
        return [Operation.PICK, Operation.IDENTITY]

    def constrain(self, probe):
        if probe is None or not probe.has_id:
            return []
        return [("series", list(probe.series), None)]

    def reconcile(self, state):
        series = state["series"]
        if not state["multiple"] and series and len(series) > 1:
            return {"series": series[:1]}
        return {}

    def build_call(self, state, probe=None):
        series = state["series"]
        if not series or (probe is not None and not probe.has_id):
            return SymbolicCall.build(Operation.IDENTITY)
        return SymbolicCall.build(Operation.PICK, series=series)

    def describe(self, state):
        series = state["series"]
        if not series:
            return "Keeping all series"
        return f"Selecting {', '.join(series)}"
