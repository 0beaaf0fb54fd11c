from abc import ABC, abstractmethod

from tscore.calls import OutputKind
from tscore.errors import ShapeValidationError
from tscore.inputs import Frame
from tscore.toolbox import check_long


class TsBlock(ABC):
    """
    Abstract base class for all time series blocks.

    A block is stateless: its options live in the state store of a block
    instance, and every method receives the current option values.
    """

    @property
    @abstractmethod
    def identifier(self):
        """Registry identifier, e.g. 'ts_lag_block'."""
        pass

    @property
    @abstractmethod
    def block_name(self):
        """The user-facing name of the block."""
        pass

    @property
    @abstractmethod
    def params(self):
        """A dictionary defining the block's options, their domains, and default values."""
        pass

    @property
    @abstractmethod
    def operations(self):
        """The operations ``build_call`` may return."""
        pass

    @abstractmethod
    def build_call(self, state, probe=None):
        """
        Describe the work for the current option values.

        :param state: Read-only mapping of option values.
        :param probe: Optional DataProbe of the upstream data.
        :return: A SymbolicCall whose operation is one of ``operations``.
        """
        pass

    @property
    def category(self):
        """'data' for sources, 'transform' otherwise."""
        return "transform"

    @property
    def doc(self):
        return ""

    @property
    def output_kind(self):
        return OutputKind.CHART

    @property
    def is_source(self):
        return self.category == "data"

    @property
    def multi_input(self):
        """Whether the block takes several upstream frames."""
        return False

    @property
    def inputs(self):
        if self.is_source:
            return []
        return [{"name": "data", "type": "frame"}]

    @property
    def outputs(self):
        return [{"name": "out", "type": "frame"}]

    def validate_state(self, state):
        """
        Cross-option check run when option changes are committed.

        :raises InvalidOptionError: to reject the whole batch of changes.
        """
        return None

    def reconcile(self, state):
        """
        Derived option updates applied within the same batch.

        :return: A dictionary of option name to new value.
        """
        return {}

    def constrain(self, probe):
        """
        Option domains narrowed by upstream data.

        :return: A list of (option name, allowed values, fallback) tuples.
        """
        return []

    def validate_input(self, data, state):
        """
        Check upstream data before dispatch. By default a transform needs a
        single long-format frame (columns id (optional), time, value).

        :raises ShapeValidationError: if the data does not fit.
        """
        if self.is_source:
            return
        if not isinstance(data, Frame):
            raise ShapeValidationError(f"{self.block_name} needs a single upstream data frame")
        check_long(data.data)

    def describe(self, state):
        """One-line description of what the block does with the current options."""
        return self.doc.split("\n", 1)[0]
