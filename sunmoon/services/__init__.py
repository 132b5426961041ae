"""
Astronomy calculations for the sun and moon dial.
"""

from .moon_phase_service import LunarCycleCalculator, LunarCycleResult
from .time_angle_converter import InvalidTimeFormat, TimeAngleConverter
from .window_resolvers import MoonWindowResolver, TwilightWindowResolver, TWILIGHT_DEGREES

__all__ = [
    "LunarCycleCalculator",
    "LunarCycleResult",
    "InvalidTimeFormat",
    "TimeAngleConverter",
    "MoonWindowResolver",
    "TwilightWindowResolver",
    "TWILIGHT_DEGREES",
]
