"""
Twilight and moon window resolution on the 24-hour dial.
"""

import logging
from typing import Optional

from ..models.dial_geometry import MoonWindow, TwilightWindow
from ..models.sun_moon_data import is_moon_event_absent
from .time_angle_converter import InvalidTimeFormat, TimeAngleConverter, parse_clock_time

logger = logging.getLogger(__name__)

TWILIGHT_MINUTES = 96
TWILIGHT_DEGREES = TWILIGHT_MINUTES / 4  # 24 degrees

# Minute-field carry for a 96 minute (1h36m) shift
_CARRY_MINUTES = TWILIGHT_MINUTES - 60


class TwilightWindowResolver:
    """Derives first light and last light from sunrise and sunset."""

    def compute_twilight(self, time_str: str, is_morning: bool) -> str:
        """
        Shift a clock time by the twilight margin.

        The margin is subtracted before sunrise and added after sunset using
        minute/hour carry arithmetic, so the result stays a clock time. The
        hour wraps around midnight.

        Args:
            time_str: Sunrise or sunset "HH:MM[...]"
            is_morning: True for first light, False for last light

        Returns:
            "HH:MM", or "" with a logged warning when the input is invalid
        """
        try:
            hour, minute = parse_clock_time(time_str)
        except InvalidTimeFormat as e:
            logger.warning(f"compute_twilight() failed on input {time_str!r}: {e}")
            return ""

        hour = int(hour)
        minute = int(minute)

        if is_morning:
            if minute >= _CARRY_MINUTES:
                minute -= _CARRY_MINUTES
                hour -= 1
            else:
                minute += 60 - _CARRY_MINUTES
                hour -= 2
        else:
            if minute < 60 - _CARRY_MINUTES:
                minute += _CARRY_MINUTES
                hour += 1
            else:
                minute -= 60 - _CARRY_MINUTES
                hour += 2

        return f"{hour % 24:02d}:{minute:02d}"

    @staticmethod
    def morning_window(sunrise_angle: float) -> TwilightWindow:
        """Twilight window ending at sunrise."""
        start = sunrise_angle - TWILIGHT_DEGREES
        if start < 0:
            return TwilightWindow(start=start + 360, end=sunrise_angle + 360)
        return TwilightWindow(start=start, end=sunrise_angle)

    @staticmethod
    def evening_window(sunset_angle: float) -> TwilightWindow:
        """Twilight window starting at sunset."""
        return TwilightWindow(start=sunset_angle, end=sunset_angle + TWILIGHT_DEGREES)


class MoonWindowResolver:
    """Resolves the moonrise -> moonset sweep, including days without one of the events."""

    def __init__(self, converter: Optional[TimeAngleConverter] = None):
        self._converter = converter or TimeAngleConverter()

    def resolve(self, moonrise: Optional[str], moonset: Optional[str]) -> MoonWindow:
        """
        Resolve moonrise/moonset strings to dial angles.

        A missing moonrise starts the window at midnight (0), a missing
        moonset ends it at the following midnight (360). A moonset earlier
        in the day than the moonrise belongs to the next day and is pushed
        a full turn forward.

        Args:
            moonrise: Moonrise time or the provider's "no event" sentinel
            moonset: Moonset time or the provider's "no event" sentinel

        Returns:
            MoonWindow with rise <= set
        """
        rise_absent = is_moon_event_absent(moonrise)
        set_absent = is_moon_event_absent(moonset)

        rise = 0.0 if rise_absent else self._converter.to_dial_angle(moonrise)
        set_angle = 360.0 if set_absent else self._converter.to_dial_angle(moonset)

        return self.resolve_angles(rise, set_angle, rise_absent, set_absent)

    @staticmethod
    def resolve_angles(rise: float, set_angle: float,
                       rise_absent: bool = False, set_absent: bool = False) -> MoonWindow:
        """Order a rise/set angle pair so the sweep always runs forward."""
        if set_angle < rise:
            set_angle += 360
        return MoonWindow(rise=rise, set=set_angle, rise_absent=rise_absent, set_absent=set_absent)
