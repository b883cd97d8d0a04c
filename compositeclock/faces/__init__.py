# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""Clock face implementations."""

from .base import BaseFace, EditSession
from .analogue import AnalogueFace, AnalogueAngles, ANALOGUE_CELL
from .digital import DigitalFace, DIGITAL_CELL

# Registry of available clock faces
FACES = {
    'analogue': AnalogueFace,
    'digital': DigitalFace,
}

__all__ = [
    'BaseFace',
    'EditSession',
    'AnalogueFace',
    'AnalogueAngles',
    'ANALOGUE_CELL',
    'DigitalFace',
    'DIGITAL_CELL',
    'FACES',
]
