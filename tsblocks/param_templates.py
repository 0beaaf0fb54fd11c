"""
Reusable option definition templates for time series blocks.

This module provides factory functions that generate common option definitions,
reducing duplication across block implementations.

Usage:
    from tsblocks.param_templates import method_param, date_param

    @property
    def params(self):
        return {
            **method_param(["index", "normalize", "minmax"], "index"),
            **date_param("base", doc="Base period set to 100"),
        }
"""

from typing import Any, Dict, List, Optional

# Type alias for parameter dictionary
ParamDict = Dict[str, Dict[str, Any]]


def method_param(
    choices: List[str],
    default: str,
    param_name: str = "method",
    doc: Optional[str] = None
) -> ParamDict:
    """
    Create a method selection parameter.

    Used by blocks that support several algorithms (change, scale, decompose).

    Args:
        choices: List of valid method names
        default: Default method
        param_name: Parameter name (default "method")
        doc: Documentation string (auto-generated if None)

    Returns:
        Parameter dict with method definition
    """
    if doc is None:
        doc = f"Method: {', '.join(choices)}"

    return {
        param_name: {
            "type": "string",
            "default": default,
            "doc": doc,
            "choices": choices
        }
    }


def int_param(
    param_name: str,
    default: int,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
    doc: str = ""
) -> ParamDict:
    """
    Create a bounded integer parameter.

    Args:
        param_name: Parameter name
        default: Default value
        minimum: Smallest allowed value (None for unbounded)
        maximum: Largest allowed value (None for unbounded)
        doc: Documentation string

    Returns:
        Parameter dict with the integer definition
    """
    return {
        param_name: {
            "type": "int",
            "default": default,
            "min": minimum,
            "max": maximum,
            "doc": doc
        }
    }


def date_param(param_name: str, default: Optional[str] = None, doc: str = "") -> ParamDict:
    """
    Create an optional date parameter.

    Accepts full or partial dates ('2020', '2020-01', '2020-01-15');
    None leaves the bound unset.
    """
    return {
        param_name: {
            "type": "date",
            "default": default,
            "nullable": True,
            "doc": doc
        }
    }


def flag_param(param_name: str, default: bool, doc: str = "") -> ParamDict:
    return {
        param_name: {
            "type": "bool",
            "default": default,
            "doc": doc
        }
    }


def granularity_param(
    param_name: str = "to",
    default: str = "year",
    doc: str = "Target frequency"
) -> ParamDict:
    """
    Create a target frequency parameter.

    Choices are ordered from coarsest to finest, as shown in forms.
    """
    return {
        param_name: {
            "type": "string",
            "default": default,
            "doc": doc,
            "choices": ["year", "quarter", "month", "week", "day"]
        }
    }
