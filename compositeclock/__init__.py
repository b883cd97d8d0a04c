# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
# CompositeClock - analogue and digital clock faces sharing one time value
"""
CompositeClock keeps an analogue face and a digital readout in sync with a
single shared timestamp, and lets either face be edited independently.
"""

__version__ = "1.0.0"
__author__ = "Luc Vincent"
