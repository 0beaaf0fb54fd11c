from tscore.calls import Operation, SymbolicCall
from tscore.errors import InvalidOptionError
from tscore.toolbox import COMPONENTS, DECOMPOSITION_METHODS, METHOD_COMPONENTS
from tsblocks.base_block import TsBlock
from tsblocks.param_templates import method_param

COMPONENT_OPERATIONS = {
    "seasonal_adjusted": Operation.SEASONAL_ADJUST,
    "trend": Operation.TREND,
    "seasonal": Operation.SEASONAL,
    "remainder": Operation.REMAINDER,
}

COMPONENT_DESCRIPTIONS = {
    "seasonal_adjusted": "Removes seasonal patterns from the data",
    "trend": "Extracts the long-term trend component",
    "seasonal": "Isolates repeating seasonal patterns",
    "remainder": "Shows irregular variations after removing trend and seasonal",
}

METHOD_NOTES = {
    "stl": "Using Seasonal and Trend decomposition using Loess",
    "x13": "Using X-13 ARIMA-SEATS (requires the X-13 binary)",
    "hp_filter": "Using Hodrick-Prescott filter",
}


class TsDecomposeBlock(TsBlock):
    """
    Extracts one component of a seasonal decomposition.

    The Hodrick-Prescott filter splits a series into trend and cycle only, so
    it offers the trend and remainder components. Selecting it while another
    component is chosen switches the component to trend.
    """

    @property
    def identifier(self):
        return "ts_decompose_block"

    @property
    def block_name(self):
        return "Decompose"

    @property
    def doc(self):
        return (
            "Decomposes a time series into components."
            "\n\nComponents: seasonally adjusted, trend, seasonal, remainder."
            "\nMethods: stl (all components), x13 (all components, needs the"
            "\nX-13ARIMA-SEATS binary), hp_filter (trend and remainder)."
        )

    @property
    def params(self):
        return {
            **method_param(list(COMPONENTS), "seasonal_adjusted", param_name="component",
                           doc="Component to extract"),
            **method_param(list(DECOMPOSITION_METHODS), "stl", doc="Decomposition method"),
        }

    @property
    def operations(self):
        return list(COMPONENT_OPERATIONS.values())

    def reconcile(self, state):
        # hp_filter has no seasonal part; fall back to its trend
        if state["component"] not in METHOD_COMPONENTS[state["method"]]:
            return {"component": "trend"}
        return {}

    def validate_state(self, state):
        component, method = state["component"], state["method"]
        if component not in METHOD_COMPONENTS[method]:
            raise InvalidOptionError(
                f"Method '{method}' provides only {list(METHOD_COMPONENTS[method])}, not '{component}'",
                option="component")

    def build_call(self, state, probe=None):
        return SymbolicCall.build(COMPONENT_OPERATIONS[state["component"]], method=state["method"])

    def describe(self, state):
        return f"{COMPONENT_DESCRIPTIONS[state['component']]}. {METHOD_NOTES[state['method']]}"
