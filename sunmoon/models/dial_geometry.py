"""
Dial geometry models for Sun Moon Builder.

A dial angle is a clock position in degrees: 0 is midnight (drawn straight
down), 180 is noon (straight up), increasing clockwise. Angles are never
negative; an end angle may run past 360 so that a window crossing midnight
is still an increasing start -> end pair.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TwilightWindow:
    """Twilight margin between first/last light and sunrise/sunset."""
    start: float
    end: float

    def __post_init__(self):
        """Validate window bounds."""
        if self.start < 0:
            raise ValueError(f"Twilight window cannot start before midnight: {self.start}")
        if self.end < self.start:
            raise ValueError("Twilight window end cannot be before its start")

    @property
    def span(self) -> float:
        """Get the window width in degrees."""
        return self.end - self.start


@dataclass(frozen=True)
class MoonWindow:
    """Moonrise to moonset sweep on the dial."""
    rise: float
    set: float
    rise_absent: bool = False
    set_absent: bool = False

    @property
    def span(self) -> float:
        """Get the moon-up sweep in degrees."""
        return self.set - self.rise

    @property
    def crosses_midnight(self) -> bool:
        """Check if the moon sets after the following midnight."""
        return self.set > 360

    def contains(self, angle: float) -> bool:
        """Check if a time-of-day angle falls strictly inside the window."""
        return self.rise < angle < self.set or self.rise < angle + 360 < self.set


@dataclass(frozen=True)
class LabelSlot:
    """Fixed screen position of a two-line time label."""
    index: int
    x: int
    y: int


@dataclass(frozen=True)
class LabelPlacement:
    """Slots chosen for the four sun-related labels."""
    sunrise: LabelSlot
    first_light: LabelSlot
    sunset: LabelSlot
    last_light: LabelSlot


@dataclass(frozen=True)
class DialGeometry:
    """Everything the renderer needs to lay out one dial, in dial angles."""
    sunrise: float
    sunset: float
    current_time: float
    morning_twilight: TwilightWindow
    evening_twilight: TwilightWindow
    moon: MoonWindow
    labels: LabelPlacement

    @property
    def sun_up(self) -> bool:
        """Check if the current time falls between sunrise and sunset."""
        return self.sunrise < self.current_time < self.sunset

    @property
    def moon_up(self) -> bool:
        """Check if the current time falls inside the moon-up window."""
        return self.moon.contains(self.current_time)
