"""
Block instance: one configured block wired to its state, evaluator and
output listeners.

``run()`` is the direct path and raises block errors. ``receive()`` is the
path a host uses when upstream data arrives: errors are recorded on the
instance, logged, and ``None`` is published so downstream blocks go quiet
instead of failing in turn.
"""

import logging
from types import MappingProxyType
from typing import Callable, List, Optional, Set

import pandas as pd

from tscore.calls import SymbolicCall
from tscore.errors import InvalidOptionError, TsBlockError
from tscore.evaluator import evaluate
from tscore.inputs import EMPTY, Empty, Input, resolve_input
from tscore.probe import DataProbe, probe_input
from tscore.reactive import StateStore
from tscore.types import BlockConfig, OutputCallback

logger = logging.getLogger(__name__)


class BlockInstance:
    """
    Attributes:
        block: The stateless block definition
        name: Instance name used in logs and errors
        config: Options given at construction (read-only)
        state: Reactive option store
        probe: Shape probe of the last upstream data
        call: Last dispatched call
        output: Last published result (None after a failure)
        error: Last block error, None after a successful run
        generation: Number of the latest dispatch
    """

    def __init__(self, block, options: Optional[BlockConfig] = None, name: Optional[str] = None):
        self.block = block
        self.name = name or block.identifier
        self.config = MappingProxyType(dict(options or {}))
        self.state = StateStore(
            block.params,
            self.config,
            validator=block.validate_state,
            reconciler=block.reconcile,
            owner=self.name,
        )
        self.probe: Optional[DataProbe] = None
        self.call: Optional[SymbolicCall] = None
        self.output: Optional[pd.DataFrame] = None
        self.error: Optional[TsBlockError] = None
        self.generation = 0

        self._upstream: Input = EMPTY
        self._constrained: Set[str] = set()
        self._listeners: List[OutputCallback] = []
        self._has_run = False
        self._running = False
        self.state.subscribe(self._on_state_change)

    def get(self, name: str):
        return self.state.get(name)

    def set_option(self, name: str, value) -> None:
        self.state.set(name, value)

    def update(self, **values) -> None:
        self.state.update(**values)

    def describe(self) -> str:
        return self.block.describe(self.state.snapshot())

    def on_output(self, callback: OutputCallback) -> Callable[[], None]:
        """Subscribe to published results; returns a function that removes the listener."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)
        return unsubscribe

    def build_call(self) -> SymbolicCall:
        """
        Build the call for the current options and probe.

        Raises:
            InvalidOptionError: if the block returns an operation outside its menu
        """
        call = self.block.build_call(self.state.snapshot(), self.probe)
        if call.operation not in self.block.operations:
            raise InvalidOptionError(
                f"Operation {call.operation.value} is not offered by {self.block.identifier}",
                block=self.name)
        return call

    def _apply_probe(self, data: Input) -> None:
        self.probe = probe_input(data)
        constraints = self.block.constrain(self.probe)
        names = set()
        for option, choices, fallback in constraints:
            self.state.constrain(option, choices, fallback)
            names.add(option)
        for option in self._constrained - names:
            self.state.constrain(option, None)
        self._constrained = names

    def run(self, upstream=None) -> Optional[pd.DataFrame]:
        """
        Recompute the output from upstream data and publish it.

        A transform without upstream data yields None without evaluating.

        Raises:
            InvalidOptionError, ShapeValidationError, EvaluationError
        """
        self.generation += 1
        generation = self.generation
        self._has_run = True
        self._running = True
        try:
            data = resolve_input(upstream)
            self._upstream = data
            self._apply_probe(data)

            if not self.block.is_source and isinstance(data, Empty):
                logger.debug(f"{self.name}: no upstream data")
                result = None
            else:
                self.block.validate_input(data, self.state.snapshot())
                self.call = self.build_call()
                result = evaluate(self.call, EMPTY if self.block.is_source else data)
        except TsBlockError as e:
            if e.block is None:
                e.block = self.name
            raise
        finally:
            self._running = False

        self.error = None
        self._publish(result, generation)
        return result

    def receive(self, upstream=None) -> Optional[pd.DataFrame]:
        """Run, recording block errors on the instance instead of raising."""
        try:
            return self.run(upstream)
        except TsBlockError as e:
            self.error = e
            logger.error(f"Block failed: {e}")
            self._publish(None, self.generation)
            return None

    def rerun(self) -> Optional[pd.DataFrame]:
        """Recompute with the last upstream data."""
        return self.receive(self._upstream)

    def _publish(self, result: Optional[pd.DataFrame], generation: int) -> None:
        self.output = result
        for callback in list(self._listeners):
            callback(result, generation)

    def _on_state_change(self, changed) -> None:
        if self._running or not self._has_run:
            return
        logger.debug(f"{self.name}: recomputing after change of {sorted(changed)}")
        self.rerun()

    def __repr__(self):
        return f"BlockInstance({self.name!r}, {dict(self.state.snapshot())!r})"
