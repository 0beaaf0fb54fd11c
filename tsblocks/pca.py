from tscore.calls import Operation, SymbolicCall
from tscore.errors import ShapeValidationError
from tsblocks.base_block import TsBlock
from tsblocks.param_templates import flag_param, int_param


class TsPcaBlock(TsBlock):
    """
    Principal components of multivariate series.
    """

    @property
    def identifier(self):
        return "ts_pca_block"

    @property
    def block_name(self):
        return "PCA"

    @property
    def doc(self):
        return (
            "Principal component analysis of multivariate series."
            "\n\nOnly dates where every series is observed are used. The output"
            "\nholds one series per component (PC1, PC2, ...)."
        )

    @property
    def params(self):
        return {
            **int_param("n_components", 2, 1, 10, doc="Number of components to extract"),
            **flag_param("standardize", True, doc="Scale series to unit variance first"),
        }

    @property
    def operations(self):
        return [Operation.PRCOMP]

    def validate_input(self, data, state):
        super().validate_input(data, state)
        frame = data.data
        if "id" not in frame.columns or frame["id"].nunique() < 2:
            raise ShapeValidationError("PCA needs multivariate data with at least two series")

    def build_call(self, state, probe=None):
        return SymbolicCall.build(
            Operation.PRCOMP,
            n_components=state["n_components"],
            standardize=state["standardize"],
        )

    def describe(self, state):
        n = state["n_components"]
        suffix = "" if n == 1 else "s"
        scaling = "standardized" if state["standardize"] else "centered"
        return f"Extracting {n} principal component{suffix} from {scaling} series"
