"""
Symbolic calls.

A block never builds code. It describes the work it wants done as a
``SymbolicCall``: one member of the closed ``Operation`` enum plus named
literal arguments. The evaluator maps the operation to a function through a
lookup table.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Tuple

from tscore.errors import InvalidOptionError


class Operation(Enum):
    """Every operation a block may request."""
    LOAD_DATASET = "load_dataset"
    IDENTITY = "identity"
    BIND = "bind"
    PC = "pc"
    PCY = "pcy"
    PCA = "pca"
    DIFF = "diff"
    DIFFY = "diffy"
    FREQUENCY = "frequency"
    LAG = "lag"
    SPAN = "span"
    INDEX = "index"
    SCALE = "scale"
    MINMAX = "minmax"
    SEASONAL_ADJUST = "seasonal_adjust"
    TREND = "trend"
    SEASONAL = "seasonal"
    REMAINDER = "remainder"
    FORECAST = "forecast"
    PRCOMP = "prcomp"
    PICK = "pick"
    LONG = "long"
    TBL = "tbl"
    WIDE = "wide"

    @property
    def is_source(self) -> bool:
        """Whether the operation produces data without an upstream frame."""
        return self is Operation.LOAD_DATASET


# (required argument names, optional argument names)
SIGNATURES: Dict[Operation, Tuple[FrozenSet[str], FrozenSet[str]]] = {
    Operation.LOAD_DATASET: (frozenset({"name"}), frozenset()),
    Operation.IDENTITY: (frozenset(), frozenset()),
    Operation.BIND: (frozenset(), frozenset()),
    Operation.PC: (frozenset(), frozenset()),
    Operation.PCY: (frozenset(), frozenset()),
    Operation.PCA: (frozenset(), frozenset()),
    Operation.DIFF: (frozenset(), frozenset()),
    Operation.DIFFY: (frozenset(), frozenset()),
    Operation.FREQUENCY: (frozenset({"to", "aggregate", "na_rm"}), frozenset()),
    Operation.LAG: (frozenset({"by"}), frozenset()),
    Operation.SPAN: (frozenset(), frozenset({"start", "end"})),
    Operation.INDEX: (frozenset(), frozenset({"base"})),
    Operation.SCALE: (frozenset(), frozenset()),
    Operation.MINMAX: (frozenset(), frozenset()),
    Operation.SEASONAL_ADJUST: (frozenset({"method"}), frozenset()),
    Operation.TREND: (frozenset({"method"}), frozenset()),
    Operation.SEASONAL: (frozenset({"method"}), frozenset()),
    Operation.REMAINDER: (frozenset({"method"}), frozenset()),
    Operation.FORECAST: (frozenset({"h"}), frozenset()),
    Operation.PRCOMP: (frozenset({"n_components", "standardize"}), frozenset()),
    Operation.PICK: (frozenset({"series"}), frozenset()),
    Operation.LONG: (frozenset(), frozenset()),
    Operation.TBL: (frozenset(), frozenset()),
    Operation.WIDE: (frozenset(), frozenset()),
}


def _freeze(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


@dataclass(frozen=True)
class SymbolicCall:
    """
    A validated description of one operation and its arguments.

    Attributes:
        operation: The requested operation
        args: Named literal arguments as (name, value) pairs, sorted by name
    """
    operation: Operation
    args: Tuple[Tuple[str, Any], ...] = ()

    def __post_init__(self):
        names = [name for name, _ in self.args]
        if len(set(names)) != len(names):
            raise InvalidOptionError(f"Duplicate argument in call to {self.operation.value}: {names}")
        required, optional = SIGNATURES[self.operation]
        missing = required - set(names)
        unknown = set(names) - required - optional
        if missing:
            raise InvalidOptionError(
                f"Call to {self.operation.value} is missing arguments {sorted(missing)}")
        if unknown:
            raise InvalidOptionError(
                f"Call to {self.operation.value} got unexpected arguments {sorted(unknown)}")

    @classmethod
    def build(cls, operation: Operation, **kwargs) -> "SymbolicCall":
        """Create a call, omitting arguments whose value is None."""
        args = tuple(sorted((name, _freeze(value)) for name, value in kwargs.items()
                            if value is not None))
        return cls(operation, args)

    @property
    def kwargs(self) -> Dict[str, Any]:
        return dict(self.args)

    def __str__(self):
        rendered = ", ".join(f"{name}={value!r}" for name, value in self.args)
        return f"{self.operation.value}({rendered})"


class OutputKind(Enum):
    """How a block's result is shown."""
    CHART = "chart"
    TABLE = "table"
