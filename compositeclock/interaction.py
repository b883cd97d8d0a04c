# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""
Input handling for the clock faces.
Translates pointer and keyboard events from a view into edit-mode
transitions. Coordinates are screen pixels with y growing downwards.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from .faces import AnalogueFace, DigitalFace

logger = logging.getLogger(__name__)

KEY_ENTER = "Enter"
KEY_ESCAPE = "Escape"


@dataclass
class FaceBounds:
    """Screen rectangle occupied by a face."""
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


class AnalogueInteraction:
    """
    Drag-to-set handling for the analogue face.

    Pressing the minute hand starts editing, moving drags the hand, releasing
    or leaving the face commits, and Escape cancels.
    """

    def __init__(self, face: AnalogueFace):
        self._face = face

    def on_minute_hand_down(self) -> None:
        self._face.enter_edit_mode()

    def on_pointer_up(self) -> None:
        self._face.exit_edit_mode()

    def on_pointer_leave(self) -> None:
        self._face.exit_edit_mode()

    def on_key_down(self, key: str) -> None:
        if key == KEY_ESCAPE and self._face.is_edit_mode:
            self._face.exit_edit_mode(submit=False)

    def on_pointer_move(self, client_x: float, client_y: float, bounds: FaceBounds) -> None:
        """Drag the minute hand towards the pointer while editing."""
        if not self._face.is_edit_mode:
            return

        origin_x, origin_y = bounds.center
        point_x = client_x - origin_x
        point_y = origin_y - client_y

        if point_x == 0 and point_y == 0:
            logger.debug("Ignoring pointer at face center")
            return

        self._face.track_pointer(point_x, point_y)


class DigitalInteraction:
    """
    Text-entry handling for the digital face.

    Clicking the display starts editing, Enter submits, and Escape or losing
    focus cancels.
    """

    def __init__(self, face: DigitalFace):
        self._face = face

    def on_display_click(self) -> None:
        self._face.enter_edit_mode()

    def on_editor_change(self, text: str) -> None:
        self._face.update_text(text)

    def on_editor_key_down(self, key: str) -> None:
        if key == KEY_ENTER:
            self._face.exit_edit_mode()
        elif key == KEY_ESCAPE:
            self._face.exit_edit_mode(submit=False)

    def on_editor_blur(self) -> None:
        self._face.exit_edit_mode(submit=False)
