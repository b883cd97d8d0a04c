# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""
Reactive state store for CompositeClock.

A Store maps state cells to immutable values and notifies subscribers when a
cell's value changes. Several cells can be updated together in one
transaction; subscribers only ever observe the fully applied result.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)

OnChange = Callable[[Any, Any], None]


class StoreDisposedError(RuntimeError):
    """Raised when a disposed store is accessed."""


@dataclass(frozen=True, eq=False)
class StateCell:
    """Declaration of an addressable piece of state.

    The cell object itself is the key; two cells with the same name are
    still distinct cells.
    """
    name: str
    default: Any = None

    def __repr__(self) -> str:
        return f"StateCell({self.name!r})"


class Store:
    """
    Registry of state cells with atomic updates and change notification.

    All reads and writes go through one re-entrant lock, so a background
    ticker and event handlers can share a store. Subscribers are called
    synchronously while the lock is held and may themselves read, write or
    (un)subscribe.
    """

    def __init__(self, initialize: Optional[Callable[["Store"], None]] = None):
        """
        Initialize the store.

        Args:
            initialize: Optional callback to seed cells right away instead of
                relying on lazy defaults.
        """
        self._lock = threading.RLock()
        self._values: Dict[StateCell, Any] = {}
        self._subscribers: Dict[StateCell, Dict[OnChange, None]] = {}
        self._disposed = False

        if initialize:
            initialize(self)

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def lock(self) -> threading.RLock:
        """Lock behind every store operation; hold it to group several calls."""
        return self._lock

    def _check_alive(self) -> None:
        if self._disposed:
            raise StoreDisposedError("Store has been disposed")

    def _get(self, cell: StateCell) -> Any:
        if cell not in self._values:
            self._values[cell] = cell.default
        return self._values[cell]

    @staticmethod
    def _is_changed(old_value: Any, new_value: Any) -> bool:
        return new_value is not old_value and new_value != old_value

    def _notify(self, cell: StateCell, new_value: Any, old_value: Any) -> None:
        # Snapshot so (un)subscribing during dispatch only affects later rounds
        callbacks = list(self._subscribers.get(cell, ()))
        for on_change in callbacks:
            on_change(new_value, old_value)

    def get(self, cell: StateCell) -> Any:
        """Return the current value of a cell, initializing it on first access."""
        with self._lock:
            self._check_alive()
            return self._get(cell)

    def set(self, cell: StateCell, value_or_updater: Any) -> Any:
        """
        Write a cell.

        Args:
            cell: Cell to write.
            value_or_updater: New value, or a callable taking the old value
                and returning the new one.

        Returns:
            The new value.
        """
        with self._lock:
            self._check_alive()
            old_value = self._get(cell)
            if callable(value_or_updater):
                new_value = value_or_updater(old_value)
            else:
                new_value = value_or_updater

            if self._is_changed(old_value, new_value):
                self._values[cell] = new_value
                self._notify(cell, new_value, old_value)

            return new_value

    def transact(
        self,
        cells: Iterable[StateCell],
        fn: Callable[..., Iterable[Any]],
        *payloads: Any
    ) -> Tuple[Any, ...]:
        """
        Read several cells, compute their new values and write them together.

        Every changed cell is written before any subscriber is notified, so a
        subscriber of one cell always sees the other cells already updated.

        Args:
            cells: Cells taking part in the transaction.
            fn: Called as fn(old_values, *payloads); must return one new value
                per cell, in the same order.
            *payloads: Extra arguments forwarded to fn.

        Returns:
            Tuple of new values.
        """
        cells = tuple(cells)
        if len(set(cells)) != len(cells):
            raise ValueError(f"Cells listed more than once in transaction: {cells}")

        with self._lock:
            self._check_alive()
            old_values = tuple(self._get(cell) for cell in cells)
            new_values = tuple(fn(old_values, *payloads))
            if len(new_values) != len(cells):
                raise ValueError(
                    f"Transaction returned {len(new_values)} values for {len(cells)} cells"
                )

            changes = []
            for cell, old_value, new_value in zip(cells, old_values, new_values):
                if self._is_changed(old_value, new_value):
                    self._values[cell] = new_value
                    changes.append((cell, new_value, old_value))

            for cell, new_value, old_value in changes:
                self._notify(cell, new_value, old_value)

            return new_values

    def subscribe(self, cell: StateCell, on_change: OnChange) -> Callable[[], None]:
        """
        Register a listener called with (new_value, old_value) on change.

        Returns:
            Function that removes the listener.
        """
        with self._lock:
            self._check_alive()
            self._subscribers.setdefault(cell, {})[on_change] = None
        return lambda: self.unsubscribe(cell, on_change)

    def unsubscribe(self, cell: StateCell, on_change: OnChange) -> None:
        """Remove a listener. Unknown listeners are ignored."""
        with self._lock:
            subscribers = self._subscribers.get(cell)
            if subscribers:
                subscribers.pop(on_change, None)

    def watch(
        self,
        cell: StateCell,
        select: Callable[[Any], Any],
        on_change: OnChange
    ) -> Callable[[], None]:
        """
        Subscribe to a value derived from a cell.

        on_change receives (new_selected, old_selected) and only fires when
        the selected value changes, not on every write to the cell.

        Returns:
            Function that removes the listener.
        """
        with self._lock:
            last = [select(self.get(cell))]

            def on_cell_change(new_value: Any, old_value: Any) -> None:
                selected = select(new_value)
                if not self._is_changed(last[0], selected):
                    return
                previous, last[0] = last[0], selected
                on_change(selected, previous)

            return self.subscribe(cell, on_cell_change)

    def subscriber_count(self, cell: StateCell) -> int:
        """Number of listeners registered on a cell."""
        with self._lock:
            return len(self._subscribers.get(cell, ()))

    def clear(self) -> None:
        """Drop every cell value and every subscriber."""
        with self._lock:
            self._values.clear()
            for subscribers in self._subscribers.values():
                subscribers.clear()
            self._subscribers.clear()

    def dispose(self) -> None:
        """Clear the store and refuse any further use."""
        with self._lock:
            if self._disposed:
                return
            self.clear()
            self._disposed = True
        logger.debug("Store disposed")
