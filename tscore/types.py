"""
Type definitions for tsblocks.

This module provides common type aliases used throughout the codebase
for improved code readability and type checking.
"""

from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional

import pandas as pd

# Block-related types
OptionSpec = Dict[str, Any]
"""Declared domain of one option: type, default, doc, choices, min, max, nullable."""

ParamDict = Dict[str, OptionSpec]
"""All option declarations of a block (name -> spec)."""

BlockConfig = Mapping[str, Any]
"""Option values captured at construction (name -> value)."""

StateSnapshot = Mapping[str, Any]
"""Read-only view of the current option values of a block instance."""

# Callback types
ChangeCallback = Callable[[FrozenSet[str]], None]
"""Subscriber of a state store: receives the names changed in one batch."""

CellCallback = Callable[[str, Any], None]
"""Subscriber of a single cell: (name, new value) -> None."""

OutputCallback = Callable[[Optional[pd.DataFrame], int], None]
"""Listener of block output: (frame or None, generation) -> None."""
