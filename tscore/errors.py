"""
Exception types raised by time series blocks.

All errors are synchronous and local to the block instance that raised them.
"""

from typing import Optional


class TsBlockError(Exception):
    """Base class for block errors."""

    def __init__(self, message: str, block: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.block = block

    def __str__(self):
        if self.block:
            return f"[{self.block}] {self.message}"
        return self.message


class InvalidOptionError(TsBlockError, ValueError):
    """An option value is outside its declared domain."""

    def __init__(self, message: str, option: Optional[str] = None, block: Optional[str] = None):
        super().__init__(message, block=block)
        self.option = option


class ShapeValidationError(TsBlockError, ValueError):
    """Upstream data does not have the shape a block expects."""


class EvaluationError(TsBlockError, RuntimeError):
    """The underlying time series routine failed."""

    def __init__(self, message: str, operation: Optional[str] = None, block: Optional[str] = None):
        super().__init__(message, block=block)
        self.operation = operation
