# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""Analogue clock face: hand angles, drag editing and commit."""

import math
from dataclasses import dataclass, replace
from datetime import timedelta

from ..store import StateCell
from ..time_state import from_datetime, to_datetime
from ..tracker import TWO_PI, calc_minute_angle, fold_angle
from .base import BaseFace, EditSession

# Values this close below an integer are treated as that integer
_SNAP_EPSILON = 1e-9


@dataclass(frozen=True)
class AnalogueAngles:
    """Hand angles in radians, clockwise from 12 o'clock."""
    hour: float = 0.0
    minute: float = 0.0
    second: float = 0.0


ANALOGUE_CELL = StateCell("analogue", EditSession(buffer=AnalogueAngles()))


def _trunc(value: float) -> int:
    if value < 0:
        return math.trunc(value - _SNAP_EPSILON)
    return math.trunc(value + _SNAP_EPSILON)


def display_angles(timestamp: int) -> AnalogueAngles:
    """Hand angles for a timestamp.

    The hour hand creeps with the minutes and the minute hand with the
    seconds; the second hand moves in whole-second steps.
    """
    d = to_datetime(timestamp)
    return AnalogueAngles(
        hour=((d.hour % 12) / 12) * TWO_PI + (d.minute / 60) * (TWO_PI / 12),
        minute=(d.minute / 60) * TWO_PI + (d.second / 60) * (TWO_PI / 60),
        second=(d.second / 60) * TWO_PI,
    )


def hour_sector(angles: AnalogueAngles) -> int:
    """Whole hours shown on the dial (0-11, or beyond after a wrap).

    The hour hand sits at hours plus the minute hand's fraction of a turn, so
    that fraction is taken off before rounding. Hour and minutes then come
    from the same reading and cannot round up independently near 12.
    """
    return round(angles.hour / TWO_PI * 12 - angles.minute / TWO_PI)


def change_minute_angle(angles: AnalogueAngles, minute_angle: float) -> AnalogueAngles:
    """Move the minute hand to an unwrapped angle and drag the hour hand along.

    The hour hand keeps its current sector and advances by the unwrapped
    minute fraction, so a forward crossing of 12 moves it into the next hour
    and a backward crossing into the previous one.
    """
    return replace(
        angles,
        minute=fold_angle(minute_angle),
        hour=(hour_sector(angles) + minute_angle / TWO_PI) * (TWO_PI / 12),
    )


def angles_to_timestamp(angles: AnalogueAngles, timestamp: int) -> int:
    """Build a timestamp from edited hand angles.

    The hands alone cannot tell AM from PM, so the 12-hour half is taken from
    the current timestamp. The date and milliseconds are kept; hours outside
    0-23 roll over into the neighbouring day.
    """
    d = to_datetime(timestamp)
    hours = hour_sector(angles) + 12 * (d.hour // 12)
    minutes = _trunc(angles.minute / TWO_PI * 60)
    seconds = _trunc(angles.second / TWO_PI * 60)
    midnight = d.replace(hour=0, minute=0, second=0)
    return from_datetime(midnight + timedelta(hours=hours, minutes=minutes, seconds=seconds))


class AnalogueFace(BaseFace):
    """Analogue face edited by dragging the minute hand."""

    name = "analogue"
    display_name = "Analogue"
    cell = ANALOGUE_CELL

    def snapshot(self, timestamp: int) -> AnalogueAngles:
        return display_angles(timestamp)

    def commit(self, buffer: AnalogueAngles, timestamp: int) -> int:
        return angles_to_timestamp(buffer, timestamp)

    def apply_edit(self, buffer: AnalogueAngles, minute_angle: float) -> AnalogueAngles:
        return change_minute_angle(buffer, minute_angle)

    @property
    def display_angles(self) -> AnalogueAngles:
        return display_angles(self.timestamp)

    @property
    def angles(self) -> AnalogueAngles:
        """Angles to show: the edit buffer while editing, else the live time."""
        session = self.session
        if session.is_edit_mode:
            return session.buffer
        return self.display_angles

    def update_minute_angle(self, minute_angle: float) -> EditSession:
        """Set the buffer's minute hand from an unwrapped angle."""
        return self.update_buffer(minute_angle)

    def track_pointer(self, point_x: float, point_y: float) -> EditSession:
        """Move the minute hand towards a pointer offset from the face center.

        The tracker reads the buffer's current minute angle inside the same
        store update, so concurrent ticks cannot interleave.

        Raises:
            ValueError: If the pointer sits exactly on the center.
        """
        if point_x == 0 and point_y == 0:
            raise ValueError("Pointer at the face center has no direction")

        def update(session: EditSession) -> EditSession:
            if not session.is_edit_mode:
                return session
            minute_angle = calc_minute_angle(point_x, point_y, session.buffer.minute)
            return replace(session, buffer=change_minute_angle(session.buffer, minute_angle))

        return self._store.set(self.cell, update)
