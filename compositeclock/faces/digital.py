# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""Digital clock face: HH:MM:SS text, free-form editing and commit."""

import logging
import re
from typing import Optional

from ..store import StateCell
from ..time_state import from_datetime, to_datetime
from .base import BaseFace, EditSession

logger = logging.getLogger(__name__)

TIME_FORMAT = "%H:%M:%S"

# ASCII digits only; \d would also accept other scripts' digits
TIME_TEXT_PATTERN = re.compile(r"([01][0-9]|2[0-3]):([0-5][0-9]):([0-5][0-9])")

DIGITAL_CELL = StateCell("digital", EditSession(buffer=""))


def display_text(timestamp: int) -> str:
    """Format a timestamp as zero-padded 24-hour HH:MM:SS."""
    return to_datetime(timestamp).strftime(TIME_FORMAT)


def is_valid_time_text(text: str) -> bool:
    """Check that text is exactly HH:MM:SS with legal ranges."""
    return isinstance(text, str) and TIME_TEXT_PATTERN.fullmatch(text) is not None


def text_to_timestamp(text: str, timestamp: int) -> int:
    """
    Parse HH:MM:SS onto the date of an existing timestamp.

    Args:
        text: Time text in HH:MM:SS form.
        timestamp: Timestamp supplying the date.

    Returns:
        Timestamp with hour, minute and second replaced and milliseconds zeroed.

    Raises:
        ValueError: If text is not valid HH:MM:SS.
    """
    match = TIME_TEXT_PATTERN.fullmatch(text) if isinstance(text, str) else None
    if match is None:
        raise ValueError(f"Invalid time text: {text!r}. Expected HH:MM:SS")

    hour, minute, second = (int(group) for group in match.groups())
    d = to_datetime(timestamp).replace(hour=hour, minute=minute, second=second, microsecond=0)
    return from_datetime(d)


class DigitalFace(BaseFace):
    """Digital face edited as free text."""

    name = "digital"
    display_name = "Digital"
    cell = DIGITAL_CELL

    def snapshot(self, timestamp: int) -> str:
        return display_text(timestamp)

    def commit(self, buffer: str, timestamp: int) -> Optional[int]:
        if not is_valid_time_text(buffer):
            logger.debug(f"Discarding invalid time text {buffer!r}")
            return None
        return text_to_timestamp(buffer, timestamp)

    def apply_edit(self, buffer: str, text: str) -> str:
        return text

    @property
    def display_text(self) -> str:
        return display_text(self.timestamp)

    @property
    def text(self) -> str:
        """Text to show: the edit buffer while editing, else the live time."""
        session = self.session
        if session.is_edit_mode:
            return session.buffer
        return self.display_text

    @property
    def is_text_valid(self) -> bool:
        """Whether the edit buffer would be accepted. Always True when idle."""
        session = self.session
        if not session.is_edit_mode:
            return True
        return is_valid_time_text(session.buffer)

    def update_text(self, text: str) -> EditSession:
        """Replace the buffer text."""
        return self.update_buffer(text)
