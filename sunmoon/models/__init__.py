"""
Data models for Sun Moon Builder.

This module contains the astronomy snapshot structures and the dial
geometry produced from them.
"""

from .sun_moon_data import MoonPhase, WaxWane, RawSunMoonData, SunMoonSnapshot
from .dial_geometry import TwilightWindow, MoonWindow, LabelSlot, LabelPlacement, DialGeometry

__all__ = [
    "MoonPhase",
    "WaxWane",
    "RawSunMoonData",
    "SunMoonSnapshot",
    "TwilightWindow",
    "MoonWindow",
    "LabelSlot",
    "LabelPlacement",
    "DialGeometry",
]
