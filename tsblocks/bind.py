from tscore.calls import Operation, SymbolicCall
from tscore.errors import ShapeValidationError
from tscore.inputs import Frame, Frames
from tscore.toolbox import check_long
from tsblocks.base_block import TsBlock


class TsBindBlock(TsBlock):
    """
    Combines several upstream series tables into one multivariate table.
    """

    @property
    def identifier(self):
        return "ts_bind_block"

    @property
    def block_name(self):
        return "Bind"

    @property
    def doc(self):
        return (
            "Combines time series into one multivariate table."
            "\n\nInputs without an id column are named after their input name,"
            "\nor series1, series2, ... Clashing names get a numeric suffix."
        )

    @property
    def params(self):
        return {}

    @property
    def operations(self):
        return [Operation.BIND]

    @property
    def multi_input(self):
        return True

    @property
    def inputs(self):
        return [{"name": "data", "type": "frames"}]

    def build_call(self, state, probe=None):
        return SymbolicCall.build(Operation.BIND)

    def validate_input(self, data, state):
        if isinstance(data, Frame):
            check_long(data.data)
            return
        if not isinstance(data, Frames):
            raise ShapeValidationError("Bind needs at least one upstream data frame")
        for position, (name, frame) in enumerate(data.named(), start=1):
            try:
                check_long(frame)
            except ShapeValidationError as e:
                raise ShapeValidationError(f"Input {name or position}: {e.message}") from e
