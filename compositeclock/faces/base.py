# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""Base class for editable clock faces."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, Tuple

from ..store import StateCell, Store
from ..time_state import TIME_CELL, TimeState, change_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditSession:
    """Edit-mode state of one face.

    The buffer holds a snapshot of the display value taken when edit mode was
    entered. Outside edit mode it is stale and must not be displayed.
    """
    is_edit_mode: bool = False
    buffer: Any = None


class BaseFace(ABC):
    """Abstract base class for clock faces.

    Each face runs the same edit life-cycle (idle -> editing -> idle) against
    its own cell, and reads or writes the shared time cell in the same store
    transaction. Subclasses decide what the buffer holds, how it is edited
    and how it turns back into a timestamp.
    """

    # Face metadata - subclasses should override
    name: str = "base"
    display_name: str = "Base Face"
    cell: StateCell = StateCell("base", EditSession())

    def __init__(self, store: Store):
        """Initialize the face.

        Args:
            store: Store holding this face's cell and the time cell.
        """
        self._store = store

    @abstractmethod
    def snapshot(self, timestamp: int) -> Any:
        """Return the display value for a timestamp, used to seed the buffer."""

    @abstractmethod
    def commit(self, buffer: Any, timestamp: int) -> Optional[int]:
        """Convert an edited buffer into a new timestamp.

        Args:
            buffer: Edit buffer at the time of submission.
            timestamp: Current timestamp, supplying every field the buffer
                does not edit.

        Returns:
            New timestamp, or None to discard the edit.
        """

    @abstractmethod
    def apply_edit(self, buffer: Any, value: Any) -> Any:
        """Return the buffer after a mid-edit update."""

    @property
    def session(self) -> EditSession:
        return self._store.get(self.cell)

    @property
    def is_edit_mode(self) -> bool:
        return self.session.is_edit_mode

    @property
    def buffer(self) -> Any:
        return self.session.buffer

    @property
    def timestamp(self) -> int:
        return self._store.get(TIME_CELL).timestamp

    def _enter(
        self,
        states: Tuple[EditSession, TimeState]
    ) -> Tuple[EditSession, TimeState]:
        session, time_state = states
        if session.is_edit_mode:
            return states
        buffer = self.snapshot(time_state.timestamp)
        logger.debug(f"{self.display_name} entered edit mode with {buffer!r}")
        return replace(session, is_edit_mode=True, buffer=buffer), time_state

    def _exit(
        self,
        states: Tuple[EditSession, TimeState],
        submit: bool
    ) -> Tuple[EditSession, TimeState]:
        session, time_state = states
        if not session.is_edit_mode:
            return states
        if submit:
            timestamp = self.commit(session.buffer, time_state.timestamp)
            if timestamp is not None:
                time_state = change_timestamp(time_state, timestamp)
                logger.info(f"{self.display_name} committed {session.buffer!r}")
        else:
            logger.debug(f"{self.display_name} edit cancelled")
        return replace(session, is_edit_mode=False), time_state

    def enter_edit_mode(self) -> EditSession:
        """Start editing. Does nothing if already editing."""
        session, _ = self._store.transact((self.cell, TIME_CELL), self._enter)
        return session

    def exit_edit_mode(self, submit: bool = True) -> EditSession:
        """Stop editing, optionally committing the buffer to the time cell.

        Does nothing if not editing.
        """
        session, _ = self._store.transact((self.cell, TIME_CELL), self._exit, submit)
        return session

    def update_buffer(self, value: Any) -> EditSession:
        """Apply a mid-edit update. Ignored outside edit mode."""
        def update(session: EditSession) -> EditSession:
            if not session.is_edit_mode:
                logger.debug(f"{self.display_name} ignored update outside edit mode")
                return session
            return replace(session, buffer=self.apply_edit(session.buffer, value))

        return self._store.set(self.cell, update)

    def subscribe(self, on_change: Callable[[EditSession, EditSession], None]) -> Callable[[], None]:
        """Listen for edit-mode and buffer changes."""
        return self._store.subscribe(self.cell, on_change)
