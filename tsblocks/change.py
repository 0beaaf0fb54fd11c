from tscore.calls import Operation, SymbolicCall
from tsblocks.base_block import TsBlock
from tsblocks.param_templates import method_param

METHOD_OPERATIONS = {
    "pc": Operation.PC,
    "pcy": Operation.PCY,
    "pca": Operation.PCA,
    "diff": Operation.DIFF,
    "diffy": Operation.DIFFY,
}

METHOD_DESCRIPTIONS = {
    "pc": "Calculating period-on-period percentage change (e.g., month-to-month)",
    "pcy": "Calculating year-on-year percentage change (same period last year)",
    "pca": "Calculating annualized percentage change rate",
    "diff": "Calculating first differences (absolute change from previous period)",
    "diffy": "Calculating year-on-year differences (absolute change from same period last year)",
}


class TsChangeBlock(TsBlock):
    """
    Percentage changes and differences, period-on-period or year-on-year.
    """

    @property
    def identifier(self):
        return "ts_change_block"

    @property
    def block_name(self):
        return "Change"

    @property
    def doc(self):
        return (
            "Changes between periods."
            "\n\nMethods:"
            "\n- pc: period-on-period percentage change"
            "\n- pcy: year-on-year percentage change"
            "\n- pca: annualized percentage change"
            "\n- diff: first differences"
            "\n- diffy: year-on-year differences"
            "\n\nYear-on-year methods compare with the value one calendar year"
            "\nearlier; the first year of output is missing."
        )

    @property
    def params(self):
        return {
            **method_param(list(METHOD_OPERATIONS), "pc", doc="Type of change to calculate"),
        }

    @property
    def operations(self):
        return list(METHOD_OPERATIONS.values())

    def build_call(self, state, probe=None):
        return SymbolicCall.build(METHOD_OPERATIONS[state["method"]])

    def describe(self, state):
        return METHOD_DESCRIPTIONS[state["method"]]
