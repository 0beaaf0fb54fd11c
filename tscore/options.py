"""
Option domain validation.

Blocks declare their options as plain dictionaries (see
``tsblocks.param_templates``). This module checks a candidate value against
such a declaration and returns the normalized value that is stored in the
block's state.
"""

import copy
import datetime
import logging
import math
import numbers
from typing import Any, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from tscore.errors import InvalidOptionError
from tscore.types import OptionSpec

logger = logging.getLogger(__name__)

OPTION_TYPES = ("string", "int", "float", "bool", "date", "list")


def parse_period(value: Any) -> pd.Period:
    """
    Parse a full or partial date into a period.

    '2020' is the whole year, '2020-01' the month and '2020-01-15' the day.

    Raises:
        ValueError: if the value is not a recognisable date.
    """
    if isinstance(value, pd.Period):
        return value
    if isinstance(value, (pd.Timestamp, datetime.datetime, datetime.date)):
        return pd.Period(pd.Timestamp(value), freq="D")
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"not a date: {value!r}")
    return pd.Period(value.strip())


def date_bounds(value: Any) -> Tuple[pd.Timestamp, pd.Timestamp]:
    """Return the first and last instant covered by a (partial) date."""
    period = parse_period(value)
    return period.start_time, period.end_time


def _fail(name: str, message: str) -> None:
    raise InvalidOptionError(f"Option '{name}': {message}", option=name)


def validate_option(name: str, spec: OptionSpec, value: Any,
                    choices: Optional[Sequence[Any]] = None) -> Any:
    """
    Validate a value against an option declaration.

    Args:
        name: Option name, used in error messages
        spec: Declaration with 'type' and optional 'choices', 'min', 'max',
            'nullable'
        value: Candidate value
        choices: Runtime domain that overrides the declared choices

    Returns:
        The normalized value

    Raises:
        InvalidOptionError: if the value is outside the domain
    """
    opt_type = spec.get("type", "string")
    if opt_type not in OPTION_TYPES:
        _fail(name, f"unsupported option type '{opt_type}'")

    if value is None:
        if spec.get("nullable", False):
            return None
        _fail(name, "a value is required")

    allowed = choices if choices is not None else spec.get("choices")

    if opt_type == "bool":
        if isinstance(value, (bool, np.bool_)):
            return bool(value)
        _fail(name, f"expected true/false, got {value!r}")

    if opt_type in ("int", "float"):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            _fail(name, f"expected a number, got {value!r}")
        if not math.isfinite(float(value)):
            _fail(name, f"expected a finite number, got {value!r}")
        if opt_type == "int":
            if float(value) != int(value):
                _fail(name, f"expected a whole number, got {value!r}")
            value = int(value)
        else:
            value = float(value)
        lower = spec.get("min")
        upper = spec.get("max")
        if lower is not None and value < lower:
            _fail(name, f"{value} is below the minimum {lower}")
        if upper is not None and value > upper:
            _fail(name, f"{value} is above the maximum {upper}")
        return value

    if opt_type == "date":
        try:
            parse_period(value)
        except (ValueError, TypeError):
            _fail(name, f"'{value}' is not a valid date")
        if isinstance(value, (pd.Timestamp, datetime.datetime, datetime.date)):
            return pd.Timestamp(value).strftime("%Y-%m-%d")
        return value.strip()

    if opt_type == "list":
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            _fail(name, f"expected a list, got {value!r}")
        items = [str(item) for item in value]
        if allowed is not None:
            unknown = [item for item in items if item not in allowed]
            if unknown:
                _fail(name, f"unknown values {unknown}, must be among {list(allowed)}")
        return items

    # string
    if not isinstance(value, str):
        _fail(name, f"expected a string, got {value!r}")
    if allowed is not None and value not in allowed:
        _fail(name, f"'{value}' must be one of {list(allowed)}")
    return value


def default_config(params: dict) -> dict:
    """Collect the declared defaults of all options."""
    return {name: copy.deepcopy(spec.get("default")) for name, spec in params.items()}
