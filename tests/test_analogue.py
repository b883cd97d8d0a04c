# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""
Tests for the analogue face: hand angles, drag editing and commit.
"""

import math

import pytest

from compositeclock.faces.analogue import (
    AnalogueAngles,
    angles_to_timestamp,
    change_minute_angle,
    display_angles,
    hour_sector,
)
from compositeclock.time_state import to_datetime
from compositeclock.tracker import TWO_PI

from conftest import make_timestamp


def hour_angle(sector: float) -> float:
    """Hour-hand angle for a (fractional) hour on the dial."""
    return sector * TWO_PI / 12


def dial(hours: float) -> AnalogueAngles:
    """Hour and minute hands showing a (fractional) hour."""
    return AnalogueAngles(hour=hour_angle(hours), minute=(hours % 1) * TWO_PI)


class TestDisplayAngles:
    """Test angles derived from a timestamp."""

    @pytest.mark.parametrize("hour,minute,second", [
        (0, 0, 0), (13, 5, 0), (9, 41, 27), (23, 59, 59), (12, 30, 45),
    ])
    def test_second_hand(self, hour, minute, second):
        """The second hand is seconds/60 of a turn and stays in range."""
        angles = display_angles(make_timestamp(hour, minute, second))
        assert angles.second == pytest.approx(second / 60 * TWO_PI)
        assert 0 <= angles.second < TWO_PI

    def test_three_oclock(self):
        """At 03:00:00 the hour hand points right and the minute hand up."""
        angles = display_angles(make_timestamp(3, 0, 0))
        assert angles.hour == pytest.approx(math.pi / 2)
        assert angles.minute == pytest.approx(0.0)
        assert angles.second == pytest.approx(0.0)

    def test_hour_hand_creeps_with_minutes(self):
        """At 15:30 the hour hand is halfway between 3 and 4."""
        angles = display_angles(make_timestamp(15, 30, 0))
        assert angles.hour == pytest.approx(hour_angle(3.5))

    def test_minute_hand_creeps_with_seconds(self):
        """At xx:10:30 the minute hand is at 10.5 minutes."""
        angles = display_angles(make_timestamp(8, 10, 30))
        assert angles.minute == pytest.approx(10.5 / 60 * TWO_PI)

    def test_milliseconds_ignored(self):
        """Sub-second time does not move any hand."""
        assert display_angles(make_timestamp(8, 10, 30, 999)) == display_angles(make_timestamp(8, 10, 30))


class TestChangeMinuteAngle:
    """Test minute-hand edits and the hour hand following them."""

    def test_minute_is_folded(self):
        """The stored minute angle is always within [0, 2*pi)."""
        angles = change_minute_angle(dial(1), -0.1)
        assert angles.minute == pytest.approx(TWO_PI - 0.1)

    def test_hour_follows_within_sector(self):
        """A quarter turn of the minute hand moves the hour hand a quarter hour."""
        angles = change_minute_angle(dial(1.1), math.pi / 2)
        assert angles.hour == pytest.approx(hour_angle(1.25))

    def test_forward_crossing_moves_to_next_hour(self):
        """Crossing 12 forwards puts the hour hand into the next hour."""
        angles = change_minute_angle(dial(1.99), TWO_PI + 0.01)
        assert hour_sector(angles) == 2

    def test_backward_crossing_moves_to_previous_hour(self):
        """Crossing 12 backwards puts the hour hand into the previous hour."""
        angles = change_minute_angle(dial(1.01), -0.01)
        assert hour_sector(angles) == 0

    def test_second_hand_untouched(self):
        """Dragging the minute hand leaves the second hand alone."""
        angles = change_minute_angle(AnalogueAngles(hour=0.0, second=1.0), 2.0)
        assert angles.second == 1.0


class TestMinuteHandNearTwelve:
    """Test commits with the minute hand a hair short of a full turn."""

    @pytest.mark.parametrize("shortfall,expected", [
        (1e-10, (14, 0)),
        (5e-9, (13, 59)),
    ])
    def test_hour_and_minute_round_together(self, shortfall, expected):
        """Rounding the minutes up to 60 never moves the hour as well."""
        now = make_timestamp(13, 5, 0)
        angles = change_minute_angle(display_angles(now), TWO_PI - shortfall)
        result = to_datetime(angles_to_timestamp(angles, now))
        assert (result.hour, result.minute) == expected

    def test_sector_kept_for_next_drag(self):
        """A following forward crossing of 12 advances exactly one hour."""
        now = make_timestamp(13, 5, 0)
        angles = change_minute_angle(display_angles(now), TWO_PI - 1e-10)
        assert hour_sector(angles) == 1

        angles = change_minute_angle(angles, TWO_PI + 0.01)
        result = to_datetime(angles_to_timestamp(angles, now))
        assert (result.hour, result.minute) == (14, 0)

    def test_commit_through_face(self, clock):
        """The same edit made through the clock commits a single hour step."""
        clock.enter_edit_mode("analogue")
        clock.update_analogue_buffer(TWO_PI - 5e-9)
        clock.exit_edit_mode("analogue")

        assert clock.display_text == "13:59:00"


class TestAnglesToTimestamp:
    """Test converting edited angles back into a timestamp."""

    def test_pm_half_preserved(self):
        """Editing 13:05 to a "1:15" dial position stays in the afternoon."""
        angles = AnalogueAngles(hour=hour_angle(1.25), minute=math.pi / 2, second=0.0)
        result = to_datetime(angles_to_timestamp(angles, make_timestamp(13, 5, 0)))
        assert (result.hour, result.minute, result.second) == (13, 15, 0)

    def test_am_half_preserved(self):
        """The same dial position before noon stays in the morning."""
        angles = AnalogueAngles(hour=hour_angle(1.25), minute=math.pi / 2, second=0.0)
        result = to_datetime(angles_to_timestamp(angles, make_timestamp(1, 5, 0)))
        assert (result.hour, result.minute, result.second) == (1, 15, 0)

    def test_date_and_milliseconds_preserved(self):
        """Only hour, minute and second are replaced."""
        angles = AnalogueAngles(hour=hour_angle(4), minute=0.0, second=TWO_PI / 2)
        result = to_datetime(angles_to_timestamp(angles, make_timestamp(19, 5, 0, 250, day=9)))
        assert (result.year, result.month, result.day) == (2025, 1, 9)
        assert (result.hour, result.minute, result.second) == (16, 0, 30)
        assert result.microsecond == 250000

    @pytest.mark.parametrize("hour,minute,second", [
        (0, 0, 0), (13, 5, 0), (9, 41, 27), (23, 59, 59), (12, 0, 1), (11, 59, 0),
    ])
    def test_display_angles_round_trip(self, hour, minute, second):
        """Committing untouched display angles reproduces the time."""
        timestamp = make_timestamp(hour, minute, second)
        assert angles_to_timestamp(display_angles(timestamp), timestamp) == timestamp

    def test_negative_hour_rolls_back_a_day(self):
        """Dragging the hour hand back past midnight lands on the previous day."""
        angles = AnalogueAngles(hour=hour_angle(-0.5), minute=TWO_PI / 2, second=0.0)
        result = to_datetime(angles_to_timestamp(angles, make_timestamp(0, 10, 0)))
        assert (result.day, result.hour, result.minute) == (5, 23, 30)


class TestAnalogueSession:
    """Test the analogue face edit life-cycle."""

    def test_enter_snapshots_current_angles(self, clock):
        """Entering edit mode copies the live angles into the buffer."""
        clock.change_timestamp(make_timestamp(9, 41, 27))
        clock.enter_edit_mode("analogue")

        assert clock.analogue.is_edit_mode
        assert clock.analogue.buffer == display_angles(make_timestamp(9, 41, 27))

    def test_commit_preserves_pm(self, clock):
        """Dragging at 13:05 to quarter past commits 13:15:00."""
        clock.enter_edit_mode("analogue")
        clock.update_analogue_buffer(math.pi / 2)
        clock.exit_edit_mode("analogue")

        assert not clock.analogue.is_edit_mode
        assert clock.display_text == "13:15:00"

    def test_cancel_leaves_time_alone(self, clock):
        """Exiting without submit discards the drag."""
        before = clock.timestamp
        clock.enter_edit_mode("analogue")
        clock.update_analogue_buffer(math.pi / 2)
        clock.exit_edit_mode("analogue", submit=False)

        assert clock.timestamp == before
        assert not clock.analogue.is_edit_mode

    def test_angles_show_buffer_only_while_editing(self, clock):
        """The face shows the buffer while editing and live time otherwise."""
        clock.enter_edit_mode("analogue")
        clock.update_analogue_buffer(math.pi)
        assert clock.analogue.angles.minute == pytest.approx(math.pi)

        clock.exit_edit_mode("analogue", submit=False)
        assert clock.analogue.angles == clock.display_angles

    def test_track_pointer_uses_buffer_history(self, clock):
        """Dragging back across 12 moves the hour hand into the previous hour."""
        clock.enter_edit_mode("analogue")
        clock.analogue.track_pointer(0.1, 1)
        clock.analogue.track_pointer(-0.1, 1)

        assert hour_sector(clock.analogue.buffer) == 0
        clock.exit_edit_mode("analogue")
        assert clock.display_text.startswith("12:5")

    def test_track_pointer_at_center_raises(self, clock):
        """A pointer without direction is rejected."""
        clock.enter_edit_mode("analogue")
        with pytest.raises(ValueError):
            clock.analogue.track_pointer(0, 0)

    def test_track_pointer_ignored_when_idle(self, clock):
        """Pointer samples outside edit mode do nothing."""
        session = clock.analogue.session
        clock.analogue.track_pointer(1, 0)
        assert clock.analogue.session is session
