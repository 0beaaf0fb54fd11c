"""
Reactive option state.

Each block instance owns one ``StateStore``: a small set of named
``ReactiveCell`` objects, one per declared option. Writes are validated
against the option domains, grouped into batches, and subscribers are told
once per batch which names changed.
"""

import logging
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Optional, Sequence

from tscore.errors import InvalidOptionError
from tscore.options import default_config, validate_option
from tscore.types import BlockConfig, CellCallback, ChangeCallback, ParamDict, StateSnapshot

logger = logging.getLogger(__name__)


class ReactiveCell:
    """A single mutable value with change subscribers."""

    def __init__(self, name: str, value: Any):
        self.name = name
        self._value = value
        self._subscribers: List[CellCallback] = []

    def get(self) -> Any:
        return self._value

    def set(self, value: Any) -> None:
        """Store a value and notify subscribers if it differs from the current one."""
        if self._value == value and type(self._value) is type(value):
            return
        self._value = value
        for callback in list(self._subscribers):
            callback(self.name, value)

    def subscribe(self, callback: CellCallback) -> Callable[[], None]:
        """Register a callback; returns a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def _restore(self, value: Any) -> None:
        self._value = value

    def __repr__(self):
        return f"ReactiveCell({self.name!r}, {self._value!r})"


class StateStore:
    """
    Named option cells of one block instance.

    Attributes:
        params: Option declarations the cells are validated against
        owner: Name used in log and error messages
    """

    def __init__(self,
                 params: ParamDict,
                 config: Optional[BlockConfig] = None,
                 validator: Optional[Callable[[StateSnapshot], None]] = None,
                 reconciler: Optional[Callable[[StateSnapshot], Dict[str, Any]]] = None,
                 owner: Optional[str] = None) -> None:
        """
        Create the cells from declared defaults overridden by ``config``.

        Args:
            params: Option declarations of the block
            config: Initial option values
            validator: Cross-option check run on every committed batch
            reconciler: Returns derived updates applied within a batch
            owner: Block identifier for messages

        Raises:
            InvalidOptionError: if ``config`` names an unknown option or
                holds an out-of-domain value
        """
        self.params = params
        self.owner = owner
        self._validator = validator
        self._reconciler = reconciler
        self._choices: Dict[str, List[Any]] = {}
        self._subscribers: List[ChangeCallback] = []
        self._pending: set = set()
        self._depth = 0
        self._backup: Optional[Dict[str, Any]] = None

        config = dict(config or {})
        unknown = set(config) - set(params)
        if unknown:
            raise InvalidOptionError(f"Unknown options {sorted(unknown)}", block=owner)

        initial = default_config(params)
        initial.update(config)
        self._cells: Dict[str, ReactiveCell] = {}
        for name, value in initial.items():
            value = self._validate(name, value)
            cell = ReactiveCell(name, value)
            cell.subscribe(self._on_cell_change)
            self._cells[name] = cell

        if self._reconciler is not None:
            for name, value in self._reconciler(self.snapshot()).items():
                self._cells[name]._restore(self._validate(name, value))
        if self._validator is not None:
            self._validator(self.snapshot())

    def _validate(self, name: str, value: Any) -> Any:
        if name not in self.params:
            raise InvalidOptionError(f"Unknown option '{name}'", option=name, block=self.owner)
        try:
            return validate_option(name, self.params[name], value, self._choices.get(name))
        except InvalidOptionError as e:
            e.block = self.owner
            raise

    def _on_cell_change(self, name: str, value: Any) -> None:
        self._pending.add(name)

    def get(self, name: str) -> Any:
        if name not in self._cells:
            raise InvalidOptionError(f"Unknown option '{name}'", option=name, block=self.owner)
        return self._cells[name].get()

    def cell(self, name: str) -> ReactiveCell:
        return self._cells[name]

    def set(self, name: str, value: Any) -> None:
        """Validate and write one option. Outside a batch this commits immediately."""
        with self.batch():
            self._cells[self._known(name)].set(self._validate(name, value))

    def update(self, **values: Any) -> None:
        """Write several options as one batch."""
        with self.batch():
            for name, value in values.items():
                self._cells[self._known(name)].set(self._validate(name, value))

    def _known(self, name: str) -> str:
        if name not in self._cells:
            raise InvalidOptionError(f"Unknown option '{name}'", option=name, block=self.owner)
        return name

    @contextmanager
    def batch(self):
        """
        Group writes so subscribers are notified once.

        The outermost batch runs the reconciler and the cross-option validator
        on exit. If either fails, or the body raises, every cell is restored to
        its value from before the batch and nothing is notified.
        """
        outermost = self._depth == 0
        if outermost:
            self._backup = {name: cell.get() for name, cell in self._cells.items()}
        self._depth += 1
        try:
            yield self
            if outermost:
                self._commit()
        except Exception:
            if outermost:
                self._rollback()
            raise
        finally:
            self._depth -= 1
            if outermost:
                self._backup = None

        if outermost:
            self._flush()

    def _commit(self) -> None:
        if not self._pending:
            return
        if self._reconciler is not None:
            for name, value in self._reconciler(self.snapshot()).items():
                self._cells[name].set(self._validate(name, value))
        if self._validator is not None:
            try:
                self._validator(self.snapshot())
            except InvalidOptionError as e:
                e.block = self.owner
                raise

    def _rollback(self) -> None:
        for name, value in (self._backup or {}).items():
            self._cells[name]._restore(value)
        self._pending.clear()

    def _flush(self) -> None:
        if not self._pending:
            return
        changed = frozenset(self._pending)
        self._pending.clear()
        logger.debug(f"{self.owner or 'state'}: options changed {sorted(changed)}")
        for callback in list(self._subscribers):
            callback(changed)

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register a batch subscriber; returns a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def choices(self, name: str) -> Optional[List[Any]]:
        """Current domain of an option: runtime constraint or declared choices."""
        if name in self._choices:
            return list(self._choices[name])
        declared = self.params[self._known(name)].get("choices")
        return list(declared) if declared is not None else None

    def constrain(self, name: str, choices: Optional[Sequence[Any]], fallback: Any = None) -> None:
        """
        Narrow the domain of an option at runtime.

        Args:
            name: Option to constrain
            choices: Allowed values, or None to lift the constraint
            fallback: Value used when the current one falls outside the new
                domain. Without a fallback the current value is kept and
                later checks report it.
        """
        self._known(name)
        if choices is None:
            self._choices.pop(name, None)
            return
        self._choices[name] = list(choices)

        current = self._cells[name].get()
        try:
            validate_option(name, self.params[name], current, self._choices[name])
        except InvalidOptionError:
            if fallback is None:
                logger.debug(f"{self.owner}: '{name}'={current!r} is outside {list(choices)}")
                return
            logger.info(f"{self.owner}: resetting '{name}' from {current!r} to {fallback!r}")
            self.set(name, fallback)

    def snapshot(self) -> StateSnapshot:
        return MappingProxyType({name: cell.get() for name, cell in self._cells.items()})

    def __contains__(self, name):
        return name in self._cells

    def __repr__(self):
        return f"StateStore({dict(self.snapshot())!r})"
