from tscore.calls import Operation, SymbolicCall
from tsblocks.base_block import TsBlock


class TsPcBlock(TsBlock):
    """
    Period-on-period percentage change.
    """

    @property
    def identifier(self):
        return "ts_pc_block"

    @property
    def block_name(self):
        return "Percentage Change"

    @property
    def doc(self):
        return "Calculating period-on-period percentage change."

    @property
    def params(self):
        return {}

    @property
    def operations(self):
        return [Operation.PC]

    def build_call(self, state, probe=None):
        return SymbolicCall.build(Operation.PC)
