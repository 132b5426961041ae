"""
Clock time to dial angle conversion.

The dial is a 24-hour clock face: 15 degrees per hour, 0.25 degrees per
minute, midnight at the bottom and noon at the top.
"""

import logging
import math
from typing import Tuple

logger = logging.getLogger(__name__)

DEGREES_PER_HOUR = 15.0
MINUTES_PER_DEGREE = 4.0

# The canvas arc reference is the +x axis; midnight has to land straight down
RENDER_OFFSET_DEGREES = 180 - 90


class InvalidTimeFormat(ValueError):
    """Raised when a time string is not a valid 24-hour "HH:MM[...]" value."""

    pass


def parse_clock_time(time_str: str) -> Tuple[float, float]:
    """
    Parse the hour and minute fields of a "HH:MM[:SS[.mmm]]" string.

    Seconds and fractions of a second are ignored.

    Args:
        time_str: Time-of-day string

    Returns:
        Tuple of (hour, minute)

    Raises:
        InvalidTimeFormat: On fewer than two fields, non-numeric or negative
            fields, hour > 23 or minute > 59
    """
    if not isinstance(time_str, str):
        raise InvalidTimeFormat(f"Time must be a string: {time_str!r}")

    fields = time_str.split(":")
    if len(fields) < 2:
        raise InvalidTimeFormat(f"Expected HH:MM, got {time_str!r}")

    try:
        hour = float(fields[0])
        minute = float(fields[1])
    except ValueError:
        raise InvalidTimeFormat(f"Non-numeric time fields in {time_str!r}")

    if math.isnan(hour) or math.isnan(minute):
        raise InvalidTimeFormat(f"Non-numeric time fields in {time_str!r}")
    if not (0 <= hour <= 23):
        raise InvalidTimeFormat(f"Hour out of range in {time_str!r}")
    if not (0 <= minute <= 59):
        raise InvalidTimeFormat(f"Minute out of range in {time_str!r}")

    return hour, minute


class TimeAngleConverter:
    """Converts clock strings to dial angles and dial angles to canvas rotations."""

    INVALID_ANGLE = 0.0

    def to_dial_angle(self, time_str: str) -> float:
        """
        Convert a time string to a dial angle.

        "00:00" -> 0, "06:29" -> 97.25, "12:00" -> 180.

        Args:
            time_str: Time-of-day string "HH:MM[:SS[.mmm]]"

        Returns:
            Angle in [0, 360); 0 with a logged warning when the input is invalid
        """
        try:
            hour, minute = parse_clock_time(time_str)
        except InvalidTimeFormat as e:
            logger.warning(f"to_dial_angle() failed on input {time_str!r}: {e}")
            return self.INVALID_ANGLE

        return hour * DEGREES_PER_HOUR + minute / MINUTES_PER_DEGREE

    @staticmethod
    def to_render_rotation(dial_angle: float) -> float:
        """
        Convert a dial angle to the canvas arc rotation in radians.

        Angles past 360 are folded back into a single turn.
        """
        return ((dial_angle + RENDER_OFFSET_DEGREES) % 360) * math.pi / 180

    def format_clock_12h(self, time_str: str) -> str:
        """
        Format a time string as "H:MM AM/PM".

        "00:45" -> "12:45 AM", "19:04" -> "7:04 PM".

        Returns:
            Formatted time, or "" with a logged warning when the input is invalid
        """
        try:
            hour, minute = parse_clock_time(time_str)
        except InvalidTimeFormat as e:
            logger.warning(f"format_clock_12h() failed on input {time_str!r}: {e}")
            return ""

        hour_24 = int(hour)
        hour_12 = hour_24 % 12 or 12
        am_pm = "PM" if hour_24 > 11 else "AM"
        return f"{hour_12}:{int(minute):02d} {am_pm}"
