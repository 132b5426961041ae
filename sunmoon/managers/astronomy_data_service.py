"""
Astronomy data service for the sun and moon dial.

Orchestrates cache lookup, provider fetch and lunar augmentation. At most one
remote fetch happens per location per calendar day: snapshots are cached
until the end of the current local day.
"""

import logging
from datetime import date, datetime, time
from typing import Callable, Optional, Union

import pytz

from ..api.ipgeolocation_api_manager import AstronomyDataProvider
from ..cache.ttl_cache import TTLCache
from ..models.sun_moon_data import RawSunMoonData, SunMoonSnapshot
from ..services.moon_phase_service import LunarCycleCalculator
from ..services.window_resolvers import TwilightWindowResolver

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(pytz.utc)


class AstronomyDataService:
    """
    Produces SunMoonSnapshot objects for a location and date.

    The cache is owned by the caller and injected here; this service is the
    only component deciding when an entry is populated.
    """

    def __init__(self, cache: TTLCache,
                 calculator: Optional[LunarCycleCalculator] = None,
                 twilight: Optional[TwilightWindowResolver] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize the data service.

        Args:
            cache: Snapshot cache
            calculator: Lunar cycle calculator
            twilight: Twilight resolver used for first/last light
            clock: Returns the current time as an aware datetime
        """
        self._cache = cache
        self._calculator = calculator or LunarCycleCalculator()
        self._twilight = twilight or TwilightWindowResolver()
        self._clock = clock or _utc_now

    @staticmethod
    def cache_key(lat: str, lon: str, target_date: date) -> str:
        return f"lat:{lat}-lon:{lon}-date:{target_date.isoformat()}"

    @staticmethod
    def parse_date_override(date_override: Union[date, str, None]) -> Optional[date]:
        """
        Normalize a date override to a date.

        Raises:
            ValueError: If a string override is not YYYY-MM-DD
        """
        if date_override is None or date_override == "":
            return None
        if isinstance(date_override, datetime):
            return date_override.date()
        if isinstance(date_override, date):
            return date_override
        return datetime.strptime(date_override, "%Y-%m-%d").date()

    def resolve_date(self, tz: pytz.BaseTzInfo, date_override: Optional[date]) -> date:
        """Get the effective calendar date: the override, or today in the time zone."""
        if date_override is not None:
            return date_override
        return self._clock().astimezone(tz).date()

    def end_of_day_millis(self, tz: pytz.BaseTzInfo) -> int:
        """Get 23:59:59.999 of the current local day as epoch milliseconds."""
        today = self._clock().astimezone(tz).date()
        end_of_day = tz.localize(datetime.combine(today, time(23, 59, 59, 999000)))
        return int(round(end_of_day.timestamp() * 1000))

    def lunar_moment(self, tz: pytz.BaseTzInfo, date_override: Optional[date]) -> datetime:
        """
        Get the moment the lunar cycle is evaluated at.

        Today uses the current local time; an override date uses local midnight
        of that date.
        """
        if date_override is None:
            return self._clock().astimezone(tz)
        return tz.localize(datetime.combine(date_override, time.min))

    def build_snapshot(self, raw: RawSunMoonData, moment: datetime) -> SunMoonSnapshot:
        """
        Derive a snapshot from raw provider data.

        Args:
            raw: Provider answer
            moment: Local moment for the lunar cycle calculation

        Returns:
            New SunMoonSnapshot; the raw data is left untouched
        """
        lunar = self._calculator.calculate(moment)
        return SunMoonSnapshot(
            date=raw.date,
            current_time=raw.current_time,
            sunrise=raw.sunrise,
            sunset=raw.sunset,
            moonrise=raw.moonrise,
            moonset=raw.moonset,
            first_light=self._twilight.compute_twilight(raw.sunrise, is_morning=True),
            last_light=self._twilight.compute_twilight(raw.sunset, is_morning=False),
            lunar_age_days=lunar.age_days,
            lunar_illumination_percent=lunar.illumination_percent,
            lunar_wax_wane=lunar.wax_wane,
            lunar_phase=lunar.phase,
        )

    async def get_snapshot(self, lat: str, lon: str, provider: AstronomyDataProvider,
                           api_key: str, time_zone: str,
                           date_override: Union[date, str, None] = None) -> Optional[SunMoonSnapshot]:
        """
        Get the snapshot for a location, from the cache when possible.

        Args:
            lat: Latitude as handed to the provider
            lon: Longitude as handed to the provider
            provider: Source of raw sun and moon times
            api_key: Provider API key
            time_zone: IANA time zone name of the location
            date_override: Calendar date to use instead of today

        Returns:
            SunMoonSnapshot, or None if the data could not be obtained
        """
        try:
            tz = pytz.timezone(time_zone)
            override = self.parse_date_override(date_override)
        except (pytz.UnknownTimeZoneError, ValueError, TypeError) as e:
            logger.error(f"Invalid time zone or date ({time_zone!r}, {date_override!r}): {e}")
            return None

        target_date = self.resolve_date(tz, override)
        key = self.cache_key(lat, lon, target_date)
        logger.info(f"Checking cache for {key}")

        cached = self._cache.get(key)
        if cached is not None:
            try:
                return SunMoonSnapshot.from_dict(cached)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Ignoring unusable cache entry for {key}: {e}")

        try:
            raw = await provider.fetch(lat, lon, api_key, target_date)
        except Exception as e:
            logger.error(f"Error getting data from {provider.get_source_name()}: {e}")
            return None

        if raw is None:
            logger.error(f"No data returned from {provider.get_source_name()}")
            return None

        snapshot = self.build_snapshot(raw, self.lunar_moment(tz, override))
        logger.info(
            f"Date: {snapshot.date}, age: {snapshot.lunar_age_days:.2f}, "
            f"illumination: {snapshot.lunar_illumination_percent}%"
        )

        self._cache.set(key, snapshot.to_dict(), self.end_of_day_millis(tz))
        return snapshot
