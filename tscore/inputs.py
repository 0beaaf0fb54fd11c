"""
Tagged block input.

Upstream data reaches a block in one of three shapes, resolved once at the
block boundary:

- ``Empty``: no upstream data (source blocks, or an upstream failure)
- ``Frame``: a single data frame
- ``Frames``: several frames for multi-input blocks, optionally named
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, Union

import pandas as pd

from tscore.errors import ShapeValidationError


@dataclass(frozen=True)
class Empty:
    """No upstream data."""

    def __bool__(self):
        return False


EMPTY = Empty()


@dataclass(frozen=True, eq=False)
class Frame:
    data: pd.DataFrame


@dataclass(frozen=True, eq=False)
class Frames:
    items: Tuple[pd.DataFrame, ...]
    names: Tuple[Optional[str], ...] = field(default=())

    def __post_init__(self):
        if self.names and len(self.names) != len(self.items):
            raise ValueError("names and items must have the same length")

    def named(self):
        """Pairs of (name or None, frame)."""
        names = self.names or (None,) * len(self.items)
        return list(zip(names, self.items))


Input = Union[Empty, Frame, Frames]


def resolve_input(value: Any) -> Input:
    """
    Resolve a raw upstream value into a tagged input.

    Accepts None, a DataFrame, a list or tuple of DataFrames, a mapping of
    name to DataFrame, or an already tagged input.

    Raises:
        ShapeValidationError: if the value is none of the above
    """
    if isinstance(value, (Empty, Frame, Frames)):
        return value
    if value is None:
        return EMPTY
    if isinstance(value, pd.DataFrame):
        return Frame(value)
    if isinstance(value, dict):
        items, names = [], []
        for name, item in value.items():
            if not isinstance(item, pd.DataFrame):
                raise ShapeValidationError(f"Input '{name}' is not a data frame: {type(item).__name__}")
            items.append(item)
            names.append(str(name))
        return Frames(tuple(items), tuple(names)) if items else EMPTY
    if isinstance(value, (list, tuple)):
        items = [item for item in value if item is not None]
        for item in items:
            if not isinstance(item, pd.DataFrame):
                raise ShapeValidationError(f"Input is not a data frame: {type(item).__name__}")
        if not items:
            return EMPTY
        return Frames(tuple(items))
    raise ShapeValidationError(f"Unsupported input type: {type(value).__name__}")
