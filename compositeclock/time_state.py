# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""
The shared time value behind both clock faces.

Timestamps are integer milliseconds since the Unix epoch and are interpreted
in local time, the same way the faces display them.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from .store import StateCell, Store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeState:
    """Canonical clock reading."""
    timestamp: int = 0


TIME_CELL = StateCell("time", TimeState())


def now_ms() -> int:
    """Current wall-clock time in milliseconds."""
    return int(time.time() * 1000)


def to_datetime(timestamp: int) -> datetime:
    """Convert a millisecond timestamp to a naive local datetime."""
    seconds, millis = divmod(int(timestamp), 1000)
    return datetime.fromtimestamp(seconds) + timedelta(milliseconds=millis)


def from_datetime(dt: datetime) -> int:
    """Convert a naive local datetime to a millisecond timestamp."""
    seconds = int(dt.replace(microsecond=0).timestamp())
    return seconds * 1000 + dt.microsecond // 1000


def change_timestamp(state: TimeState, timestamp: int) -> TimeState:
    """Return a TimeState holding the given timestamp."""
    timestamp = int(timestamp)
    if state.timestamp == timestamp:
        return state
    return TimeState(timestamp=timestamp)


class TimeEntity:
    """
    Owner of the time cell in a store.

    All writes go through change_timestamp(), which runs as a store
    transaction so that it serializes with edit-mode commits and ticks.
    """

    def __init__(self, store: Store, timestamp: Optional[int] = None):
        """
        Initialize the time entity.

        Args:
            store: Store holding the time cell.
            timestamp: Starting timestamp in ms. Defaults to wall-clock now.
        """
        self._store = store
        if timestamp is None:
            timestamp = now_ms()
        self._store.set(TIME_CELL, TimeState(timestamp=int(timestamp)))
        logger.debug(f"Time entity initialized at {to_datetime(timestamp)}")

    @property
    def state(self) -> TimeState:
        return self._store.get(TIME_CELL)

    @property
    def timestamp(self) -> int:
        return self.state.timestamp

    @property
    def local_time(self) -> datetime:
        return to_datetime(self.timestamp)

    def change_timestamp(self, timestamp: int) -> int:
        """Replace the timestamp. Returns the stored value."""
        (state,) = self._store.transact(
            (TIME_CELL,),
            lambda states: (change_timestamp(states[0], timestamp),)
        )
        return state.timestamp

    def subscribe(self, on_change: Callable[[TimeState, TimeState], None]) -> Callable[[], None]:
        """Listen for timestamp changes."""
        return self._store.subscribe(TIME_CELL, on_change)
