from tscore.calls import Operation, SymbolicCall
from tsblocks.base_block import TsBlock


class TsAirPassengerBlock(TsBlock):
    """
    Source block with the classic monthly airline passenger series.
    """

    @property
    def identifier(self):
        return "ts_airpassenger_block"

    @property
    def block_name(self):
        return "AirPassengers"

    @property
    def category(self):
        return "data"

    @property
    def doc(self):
        return (
            "Monthly totals of international airline passengers, 1949 to 1960."
            "\n\nA univariate monthly series (thousands of passengers),"
            "\nhandy as a first input while building a pipeline."
        )

    @property
    def params(self):
        return {}

    @property
    def operations(self):
        return [Operation.LOAD_DATASET]

    def build_call(self, state, probe=None):
        return SymbolicCall.build(Operation.LOAD_DATASET, name="AirPassengers")
