"""
Evaluation of symbolic calls.

The evaluator holds a fixed table from ``Operation`` to toolbox function.
Nothing is composed from strings: a call selects a table entry and its
arguments are passed as keyword arguments.
"""

import logging
from typing import Callable, Dict

import pandas as pd

from tscore import toolbox
from tscore.calls import Operation, SymbolicCall
from tscore.datasets import load_dataset
from tscore.errors import EvaluationError, ShapeValidationError, TsBlockError
from tscore.inputs import EMPTY, Empty, Frame, Frames, resolve_input

logger = logging.getLogger(__name__)


def _decomposition(component: str) -> Callable[..., pd.DataFrame]:
    def run(frame, method):
        return toolbox.ts_decompose(frame, component=component, method=method)
    run.__name__ = f"ts_{component}"
    return run


def _frequency(frame, to, aggregate, na_rm):
    return toolbox.ts_frequency(frame, to=to, aggregate=aggregate, na_rm=na_rm)


def _forecast(frame, h):
    return toolbox.ts_forecast(frame, h=h)


DISPATCH: Dict[Operation, Callable[..., pd.DataFrame]] = {
    Operation.LOAD_DATASET: load_dataset,
    Operation.IDENTITY: toolbox.identity,
    Operation.BIND: toolbox.ts_c,
    Operation.PC: toolbox.ts_pc,
    Operation.PCY: toolbox.ts_pcy,
    Operation.PCA: toolbox.ts_pca,
    Operation.DIFF: toolbox.ts_diff,
    Operation.DIFFY: toolbox.ts_diffy,
    Operation.FREQUENCY: _frequency,
    Operation.LAG: toolbox.ts_lag,
    Operation.SPAN: toolbox.ts_span,
    Operation.INDEX: toolbox.ts_index,
    Operation.SCALE: toolbox.ts_scale,
    Operation.MINMAX: toolbox.ts_minmax,
    Operation.SEASONAL_ADJUST: _decomposition("seasonal_adjusted"),
    Operation.TREND: _decomposition("trend"),
    Operation.SEASONAL: _decomposition("seasonal"),
    Operation.REMAINDER: _decomposition("remainder"),
    Operation.FORECAST: _forecast,
    Operation.PRCOMP: toolbox.ts_prcomp,
    Operation.PICK: toolbox.ts_pick,
    Operation.LONG: toolbox.ts_long,
    Operation.TBL: toolbox.ts_tbl,
    Operation.WIDE: toolbox.ts_wide,
}


def evaluate(call: SymbolicCall, data=EMPTY) -> pd.DataFrame:
    """
    Execute a symbolic call against upstream data.

    Args:
        call: The call to execute
        data: Upstream data: nothing for source operations, a frame for
            transforms, several frames for BIND

    Returns:
        The resulting data frame

    Raises:
        ShapeValidationError: if the input does not fit the operation
        EvaluationError: if the underlying routine fails
    """
    data = resolve_input(data)
    function = DISPATCH.get(call.operation)
    if function is None:
        raise EvaluationError(f"No implementation for operation {call.operation.value}",
                              operation=call.operation.value)

    if call.operation.is_source:
        args = ()
    elif call.operation is Operation.BIND:
        if isinstance(data, Empty):
            raise ShapeValidationError("Binding needs at least one upstream data frame")
        args = (data,)
    elif isinstance(data, Frame):
        args = (data.data,)
    elif isinstance(data, Frames):
        raise ShapeValidationError(
            f"{call.operation.value} takes a single data frame, got {len(data.items)}")
    else:
        raise ShapeValidationError(f"{call.operation.value} needs an upstream data frame")

    logger.debug(f"Evaluating {call}")
    try:
        result = function(*args, **call.kwargs)
    except TsBlockError:
        raise
    except Exception as e:
        logger.error(f"{call.operation.value} failed: {e}")
        raise EvaluationError(str(e), operation=call.operation.value) from e

    if not isinstance(result, pd.DataFrame):
        raise EvaluationError(f"{call.operation.value} returned {type(result).__name__}, not a data frame",
                              operation=call.operation.value)
    return result
