# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""
Drag-to-angle tracking for the analogue minute hand.

Pointer samples are converted into a minute angle that stays continuous while
the user drags across 12 o'clock. The result is "unwrapped": it may be
negative or exceed 2*pi, so the caller can tell a crossing from a jump. Only
one crossing of 12 per sample is detected; several turns between two
samples are not disambiguated.
"""

import math

TWO_PI = 2 * math.pi


def fold_angle(angle: float) -> float:
    """Fold an unwrapped angle into [0, 2*pi)."""
    return (angle + TWO_PI) % TWO_PI


def calc_minute_angle(point_x: float, point_y: float, prev_minute_angle: float) -> float:
    """
    Compute the unwrapped minute angle for a pointer position.

    Args:
        point_x: Pointer offset from the face center, positive to the right.
        point_y: Pointer offset from the face center, positive upwards.
        prev_minute_angle: Minute angle currently held in the edit buffer
            (radians, clockwise from 12).

    Returns:
        Minute angle in radians. Negative when the hand moved back across
        12, at or above 2*pi when it moved forward across 12.

    Raises:
        ValueError: If the pointer sits exactly on the center.
    """
    length = math.hypot(point_x, point_y)
    if length == 0:
        raise ValueError("Pointer at the face center has no direction")

    normalized_x = point_x / length
    normalized_y = max(-1.0, min(1.0, point_y / length))

    old_x = math.sin(prev_minute_angle)
    old_y = math.cos(prev_minute_angle)

    raw_angle = math.acos(normalized_y)

    if normalized_y > 0 and old_y > 0:
        # Both near 12: the side the hand came from decides the turn
        if normalized_x >= 0:
            return raw_angle + TWO_PI if old_x < 0 else raw_angle
        return -raw_angle if old_x >= 0 else -raw_angle + TWO_PI

    if normalized_x >= 0:
        return raw_angle
    return -raw_angle + TWO_PI
