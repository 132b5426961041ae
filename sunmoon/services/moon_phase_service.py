"""
Lunar cycle calculations for the dial's moon data.

Moon age is derived from the Julian date of the local calendar moment and a
reference new moon; illumination, waxing/waning and the phase name all
follow from the age.
"""

import calendar
import logging
import math
from dataclasses import dataclass
from datetime import datetime

from ..models.sun_moon_data import MoonPhase, WaxWane

logger = logging.getLogger(__name__)

MSEC_PER_DAY = 24 * 60 * 60 * 1000
MIN_PER_DAY = 24 * 60


@dataclass(frozen=True)
class LunarCycleResult:
    """Result container for lunar cycle calculations."""
    age_days: float
    illumination_percent: int
    wax_wane: WaxWane
    phase: MoonPhase

    @property
    def phase_name(self) -> str:
        return self.phase.display_name


class LunarCycleCalculator:
    """Moon age, illumination and phase from a calendar moment."""

    # Earth days for one synodic month
    MOON_PERIOD_DAYS = 29.53058770576
    # Unix epoch as a Julian day
    UNIX_EPOCH_JULIAN = 2440587.5
    # Julian day of the reference new moon (2000-01-06)
    LUNAR_REFERENCE_JULIAN = 2451550.1

    # New moon straddles the wrap-around point, so the cycle is split into
    # 16 bins and every named phase except "new" takes two of them.
    PHASE_BINS = (
        MoonPhase.NEW_MOON,
        MoonPhase.WAXING_CRESCENT, MoonPhase.WAXING_CRESCENT,
        MoonPhase.FIRST_QUARTER, MoonPhase.FIRST_QUARTER,
        MoonPhase.WAXING_GIBBOUS, MoonPhase.WAXING_GIBBOUS,
        MoonPhase.FULL_MOON, MoonPhase.FULL_MOON,
        MoonPhase.WANING_GIBBOUS, MoonPhase.WANING_GIBBOUS,
        MoonPhase.LAST_QUARTER, MoonPhase.LAST_QUARTER,
        MoonPhase.WANING_CRESCENT, MoonPhase.WANING_CRESCENT,
        MoonPhase.NEW_MOON,
    )

    def julian_date(self, moment: datetime) -> float:
        """
        Get the Julian date of a moment's local wall-clock time.

        Args:
            moment: Time-zone aware datetime; a naive one is read as UTC

        Returns:
            Julian date shifted by the moment's UTC offset
        """
        if moment.tzinfo is None or moment.utcoffset() is None:
            epoch_millis = calendar.timegm(moment.timetuple()) * 1000 + moment.microsecond / 1000
            offset_minutes = 0.0
        else:
            epoch_millis = moment.timestamp() * 1000
            offset_minutes = moment.utcoffset().total_seconds() / 60

        # Equivalent to subtracting a JavaScript-style getTimezoneOffset()
        return epoch_millis / MSEC_PER_DAY + offset_minutes / MIN_PER_DAY + self.UNIX_EPOCH_JULIAN

    def age_days(self, moment: datetime) -> float:
        """Get the days elapsed since the most recent new moon, in [0, period)."""
        return (self.julian_date(moment) - self.LUNAR_REFERENCE_JULIAN) % self.MOON_PERIOD_DAYS

    def illumination_percent(self, age_days: float) -> int:
        """Get the lit percentage of the disc: 0 at new moon, 100 at full moon."""
        angle = (age_days / self.MOON_PERIOD_DAYS * 360 + 180) * math.pi / 180
        return int(math.floor(50 + 50 * math.cos(angle) + 0.5))

    def wax_wane(self, age_days: float) -> WaxWane:
        if age_days < self.MOON_PERIOD_DAYS / 2:
            return WaxWane.WAXING
        return WaxWane.WANING

    def phase(self, age_days: float) -> MoonPhase:
        """Get the phase for a moon age."""
        bin_length = self.MOON_PERIOD_DAYS / len(self.PHASE_BINS)
        index = int(age_days // bin_length)
        index = max(0, min(index, len(self.PHASE_BINS) - 1))
        return self.PHASE_BINS[index]

    def phase_name(self, age_days: float) -> str:
        """Get the display name of the phase for a moon age ("Full Moon")."""
        return self.phase(age_days).display_name

    def calculate(self, moment: datetime) -> LunarCycleResult:
        """
        Calculate all lunar values for a moment.

        Args:
            moment: Local calendar moment

        Returns:
            LunarCycleResult with age, illumination, waxing/waning and phase
        """
        age = self.age_days(moment)
        result = LunarCycleResult(
            age_days=age,
            illumination_percent=self.illumination_percent(age),
            wax_wane=self.wax_wane(age),
            phase=self.phase(age),
        )
        logger.debug(
            f"Lunar cycle for {moment.isoformat()}: age {age:.2f} days, "
            f"{result.illumination_percent}% {result.phase_name}"
        )
        return result
