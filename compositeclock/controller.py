# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""
Composite clock controller.
Owns the store for one clock instance, keeps the shared time ticking and
exposes the read/write surface used by views.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

from .faces import FACES, AnalogueAngles, AnalogueFace, BaseFace, DigitalFace
from .store import StateCell, Store, StoreDisposedError
from .time_state import TIME_CELL, TimeEntity, TimeState, change_timestamp, now_ms, to_datetime

logger = logging.getLogger(__name__)


class CompositeClock:
    """
    One analogue face and one digital face backed by a single timestamp.

    Ticking writes wall-clock time plus a correction into the time cell. The
    correction is the offset a user introduced by editing; it is only
    recomputed while neither face is in edit mode, so ticks do not fight an
    edit in progress and a committed edit persists as an offset.
    """

    DEFAULT_TICK_INTERVAL_MS = 100

    def __init__(
        self,
        timestamp: Optional[int] = None,
        tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
        wall_clock: Callable[[], int] = now_ms
    ):
        """
        Initialize the clock.

        Args:
            timestamp: Starting timestamp in ms. Defaults to wall-clock now.
            tick_interval_ms: Interval between ticks of the background thread.
            wall_clock: Function returning the current time in ms.
        """
        if tick_interval_ms <= 0:
            raise ValueError(f"tick_interval_ms must be positive, got {tick_interval_ms}")

        self._wall_clock = wall_clock
        self.tick_interval_ms = tick_interval_ms

        self.store = Store()
        self.time = TimeEntity(self.store, wall_clock() if timestamp is None else timestamp)
        self._faces: Dict[str, BaseFace] = {
            name: face_class(self.store) for name, face_class in FACES.items()
        }
        self.analogue: AnalogueFace = self._faces["analogue"]
        self.digital: DigitalFace = self._faces["digital"]

        self._correction = self._calc_correction()
        self._unsubscribers = [
            self.store.watch(face.cell, lambda session: session.is_edit_mode,
                             self._on_edit_mode_changed)
            for face in self._faces.values()
        ]

        self._running = False
        self._shutdown_event = threading.Event()
        self._tick_thread: Optional[threading.Thread] = None

        logger.info(f"Clock initialized at {to_datetime(self.timestamp)}")

    @classmethod
    def from_config(cls, config, wall_clock: Callable[[], int] = now_ms) -> "CompositeClock":
        """Create a clock from a CompositeClockConfig."""
        from .config import resolve_start_timestamp

        return cls(
            timestamp=resolve_start_timestamp(config.clock, wall_clock()),
            tick_interval_ms=config.clock.tick_interval_ms,
            wall_clock=wall_clock,
        )

    def _calc_correction(self) -> int:
        return self.time.timestamp - self._wall_clock()

    def _on_edit_mode_changed(self, is_edit_mode: bool, was_edit_mode: bool) -> None:
        if not self.is_any_editing():
            self._correction = self._calc_correction()
            logger.debug(f"Timestamp correction now {self._correction} ms")

    @property
    def correction(self) -> int:
        """Offset in ms between the clock and the wall clock."""
        return self._correction

    # -- Read accessors ------------------------------------------------------

    @property
    def timestamp(self) -> int:
        return self.time.timestamp

    @property
    def display_angles(self) -> AnalogueAngles:
        return self.analogue.display_angles

    @property
    def display_text(self) -> str:
        return self.digital.display_text

    def face(self, name: str) -> BaseFace:
        """Look up a face by name ('analogue' or 'digital')."""
        face = self._faces.get(name)
        if face is None:
            raise ValueError(f"Invalid face: {name}. Must be one of {sorted(self._faces)}")
        return face

    def is_any_editing(self) -> bool:
        return any(face.is_edit_mode for face in self._faces.values())

    def get_status(self) -> Dict[str, Any]:
        """Snapshot of everything a view needs to render."""
        analogue = self.analogue.session
        digital = self.digital.session
        return {
            "timestamp": self.timestamp,
            "time": to_datetime(self.timestamp).isoformat(timespec="milliseconds"),
            "correction_ms": self._correction,
            "running": self.is_running(),
            "analogue": {
                "display_angles": self.display_angles,
                "is_edit_mode": analogue.is_edit_mode,
                "edit_angles": analogue.buffer if analogue.is_edit_mode else None,
            },
            "digital": {
                "display_text": self.display_text,
                "is_edit_mode": digital.is_edit_mode,
                "edit_text": digital.buffer if digital.is_edit_mode else None,
                "is_text_valid": self.digital.is_text_valid,
            },
        }

    # -- Mutators ------------------------------------------------------------

    def change_timestamp(self, timestamp: int) -> int:
        """Set the clock. Outside edit mode the new offset survives the next tick."""
        with self.store.lock:
            timestamp = self.time.change_timestamp(timestamp)
            if not self.is_any_editing():
                self._correction = self._calc_correction()
        return timestamp

    def enter_edit_mode(self, face: str) -> None:
        self.face(face).enter_edit_mode()

    def exit_edit_mode(self, face: str, submit: bool = True) -> None:
        self.face(face).exit_edit_mode(submit)

    def update_analogue_buffer(self, minute_angle: float) -> None:
        self.analogue.update_minute_angle(minute_angle)

    def update_digital_buffer(self, text: str) -> None:
        self.digital.update_text(text)

    def subscribe(self, cell: StateCell, on_change: Callable[[Any, Any], None]) -> Callable[[], None]:
        return self.store.subscribe(cell, on_change)

    # -- Ticking -------------------------------------------------------------

    def tick(self) -> int:
        """Advance the clock to wall-clock time plus the correction."""
        # Correction is read inside the store lock, after any pending commit
        state = self.store.set(TIME_CELL, self._ticked)
        return state.timestamp

    def _ticked(self, state: TimeState) -> TimeState:
        return change_timestamp(state, self._wall_clock() + self._correction)

    def start(self) -> None:
        """Start ticking in a background thread."""
        if self._running:
            return

        self._shutdown_event.clear()
        self._running = True
        interval = self.tick_interval_ms / 1000

        def tick_loop():
            while not self._shutdown_event.wait(interval):
                try:
                    self.tick()
                except StoreDisposedError:
                    break
                except Exception as e:
                    logger.error(f"Tick error: {e}")

        self._tick_thread = threading.Thread(target=tick_loop, daemon=True)
        self._tick_thread.start()
        logger.info(f"Clock ticking every {self.tick_interval_ms} ms")

    def stop(self) -> None:
        """Stop the ticking thread."""
        if not self._running and not self._tick_thread:
            return
        self._running = False
        self._shutdown_event.set()
        if self._tick_thread and self._tick_thread is not threading.current_thread():
            self._tick_thread.join(timeout=1.0)
        self._tick_thread = None
        logger.info("Clock stopped")

    def is_running(self) -> bool:
        return self._running

    def dispose(self) -> None:
        """Stop ticking and tear down the store. The clock is unusable afterwards."""
        self.stop()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self.store.dispose()
        logger.info("Clock disposed")
