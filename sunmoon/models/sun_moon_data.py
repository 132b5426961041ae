"""
Sun and moon data models for Sun Moon Builder.

This module contains immutable data classes for the astronomy data behind a
dial image. The provider's answer is kept as-is in RawSunMoonData; the
derived fields (twilight times and lunar cycle values) live in
SunMoonSnapshot, which is built from the raw data by a pure transformation.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Provider sentinel for "no moonrise/moonset on this calendar day"
MOON_EVENT_ABSENT = "-:-"

# Fields every provider answer must carry
REQUIRED_FIELDS = ("date", "current_time", "sunrise", "sunset", "moonrise", "moonset")


class MoonPhase(Enum):
    """Moon phase enumeration."""
    NEW_MOON = "new_moon"
    WAXING_CRESCENT = "waxing_crescent"
    FIRST_QUARTER = "first_quarter"
    WAXING_GIBBOUS = "waxing_gibbous"
    FULL_MOON = "full_moon"
    WANING_GIBBOUS = "waning_gibbous"
    LAST_QUARTER = "last_quarter"
    WANING_CRESCENT = "waning_crescent"

    @property
    def display_name(self) -> str:
        """Get the human-readable phase name ("Waxing Gibbous")."""
        return self.value.replace("_", " ").title()


class WaxWane(Enum):
    """Whether the lit part of the moon is growing or shrinking."""
    WAXING = "waxing"
    WANING = "waning"


def is_moon_event_absent(value: Optional[str]) -> bool:
    """Check if a moonrise/moonset value means "no such event today"."""
    return value is None or value.strip() in ("", MOON_EVENT_ABSENT)


@dataclass(frozen=True)
class RawSunMoonData:
    """
    Immutable provider answer for one location and date.

    Only the fields the dial consumes are typed; anything else the
    provider sent is kept untouched in ``extras``.
    """
    date: date
    current_time: str
    sunrise: str
    sunset: str
    moonrise: str
    moonset: str
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RawSunMoonData":
        """
        Build raw data from a provider JSON object.

        Args:
            data: Decoded provider response

        Returns:
            RawSunMoonData with the consumed fields

        Raises:
            ValueError: If a required field is missing or the date is malformed
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

        missing = [name for name in REQUIRED_FIELDS if data.get(name) is None]
        if missing:
            raise ValueError(f"Missing fields in astronomy data: {', '.join(missing)}")

        try:
            data_date = datetime.strptime(str(data["date"]), "%Y-%m-%d").date()
        except ValueError:
            raise ValueError(f"Invalid date in astronomy data: {data['date']}")

        extras = {k: v for k, v in data.items() if k not in REQUIRED_FIELDS}
        return cls(
            date=data_date,
            current_time=str(data["current_time"]),
            sunrise=str(data["sunrise"]),
            sunset=str(data["sunset"]),
            moonrise=str(data["moonrise"]),
            moonset=str(data["moonset"]),
            extras=extras,
        )

    @property
    def has_moonrise(self) -> bool:
        return not is_moon_event_absent(self.moonrise)

    @property
    def has_moonset(self) -> bool:
        return not is_moon_event_absent(self.moonset)


@dataclass(frozen=True)
class SunMoonSnapshot:
    """
    Immutable astronomy snapshot for one location and date.

    Created by AstronomyDataService and consumed by DialRenderer. Times are
    24-hour "HH:MM[:SS[.mmm]]" strings exactly as the provider sent them;
    first_light and last_light are "HH:MM".
    """
    date: date
    current_time: str
    sunrise: str
    sunset: str
    moonrise: str
    moonset: str
    first_light: str
    last_light: str
    lunar_age_days: float
    lunar_illumination_percent: int
    lunar_wax_wane: WaxWane
    lunar_phase: MoonPhase

    def __post_init__(self):
        """Validate snapshot data on creation."""
        if not (0 <= self.lunar_illumination_percent <= 100):
            raise ValueError(
                f"Lunar illumination must be between 0 and 100: {self.lunar_illumination_percent}"
            )
        if self.lunar_age_days < 0:
            raise ValueError(f"Lunar age cannot be negative: {self.lunar_age_days}")

    @property
    def lunar_phase_name(self) -> str:
        """Get the display name of the lunar phase."""
        return self.lunar_phase.display_name

    @property
    def has_moonrise(self) -> bool:
        return not is_moon_event_absent(self.moonrise)

    @property
    def has_moonset(self) -> bool:
        return not is_moon_event_absent(self.moonset)

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to a JSON-serializable dictionary."""
        return {
            "date": self.date.isoformat(),
            "current_time": self.current_time,
            "sunrise": self.sunrise,
            "sunset": self.sunset,
            "moonrise": self.moonrise,
            "moonset": self.moonset,
            "first_light": self.first_light,
            "last_light": self.last_light,
            "lunar_age_days": self.lunar_age_days,
            "lunar_illumination_percent": self.lunar_illumination_percent,
            "lunar_wax_wane": self.lunar_wax_wane.value,
            "lunar_phase": self.lunar_phase.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SunMoonSnapshot":
        """
        Create snapshot from a dictionary produced by to_dict().

        Raises:
            KeyError: If a field is missing
            ValueError: If a field has an invalid value
        """
        return cls(
            date=date.fromisoformat(data["date"]),
            current_time=data["current_time"],
            sunrise=data["sunrise"],
            sunset=data["sunset"],
            moonrise=data["moonrise"],
            moonset=data["moonset"],
            first_light=data["first_light"],
            last_light=data["last_light"],
            lunar_age_days=float(data["lunar_age_days"]),
            lunar_illumination_percent=int(data["lunar_illumination_percent"]),
            lunar_wax_wane=WaxWane(data["lunar_wax_wane"]),
            lunar_phase=MoonPhase(data["lunar_phase"]),
        )
