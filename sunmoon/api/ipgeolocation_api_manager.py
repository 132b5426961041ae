"""
Astronomy API manager for fetching sun and moon times.

This module handles communication with the ipgeolocation.io astronomy API
behind small abstractions so the data service can be given any provider,
and the provider any HTTP client.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

import aiohttp

from version import get_user_agent
from ..models.sun_moon_data import RawSunMoonData

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.ipgeolocation.io/astronomy"
DEFAULT_TIMEOUT_SECONDS = 5


class AstronomyAPIException(Exception):
    """Base exception for astronomy API-related errors."""

    pass


class AstronomyNetworkException(AstronomyAPIException):
    """Exception for network-related errors, including timeouts."""

    pass


class AstronomyDataException(AstronomyAPIException):
    """Exception for malformed or incomplete astronomy data."""

    pass


class AstronomyRateLimitException(AstronomyAPIException):
    """Exception for rate limit exceeded errors."""

    pass


class AstronomyAuthenticationException(AstronomyAPIException):
    """Exception for API key errors."""

    pass


@dataclass
class AstronomyAPIResponse:
    """Container for raw astronomy API response data."""

    status_code: int
    data: Union[Dict[str, Any], List[Any], None]
    timestamp: datetime
    source: str
    url: str


class HTTPClient(ABC):
    """Abstract HTTP client interface for dependency injection."""

    @abstractmethod
    async def get(self, url: str, params: Dict[str, Any]) -> AstronomyAPIResponse:
        """Make HTTP GET request."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close HTTP client."""
        pass


class AioHttpClient(HTTPClient):
    """HTTP client implementation using aiohttp."""

    def __init__(self, timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS):
        """Initialize HTTP client with a total request timeout."""
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout, headers={"User-Agent": get_user_agent()}
            )
        return self._session

    async def get(self, url: str, params: Dict[str, Any]) -> AstronomyAPIResponse:
        """
        Make HTTP GET request.

        Raises:
            AstronomyNetworkException: On connection errors and timeouts
            AstronomyDataException: When the body is not valid JSON
        """
        session = await self._ensure_session()

        try:
            async with session.get(url, params=params) as response:
                data = await response.json(content_type=None)
                return AstronomyAPIResponse(
                    status_code=response.status,
                    data=data,
                    timestamp=datetime.now(),
                    source="ipgeolocation",
                    url=str(response.url),
                )
        except asyncio.TimeoutError as e:
            raise AstronomyNetworkException(f"Request timed out: {e}")
        except aiohttp.ClientError as e:
            raise AstronomyNetworkException(f"Network error: {e}")
        except json.JSONDecodeError as e:
            raise AstronomyDataException(f"Invalid JSON response: {e}")
        except Exception as e:
            raise AstronomyAPIException(f"HTTP request failed: {e}")

    async def close(self) -> None:
        """Close HTTP client."""
        if self._session and not self._session.closed:
            await self._session.close()


class AstronomyDataProvider(ABC):
    """
    Abstract source of raw sun and moon times.

    Implementations fail by raising AstronomyAPIException subclasses and
    should not hang: a provider applies its own timeout.
    """

    @abstractmethod
    async def fetch(self, lat: str, lon: str, api_key: str, target_date: date) -> RawSunMoonData:
        """Fetch raw astronomy data for a location and calendar date."""
        pass

    @abstractmethod
    def get_source_name(self) -> str:
        """Get the name of the astronomy data source."""
        pass

    async def shutdown(self) -> None:
        """Release any resources held by the provider."""
        pass


class IPGeolocationProvider(AstronomyDataProvider):
    """
    ipgeolocation.io astronomy API.

    Example response (trimmed):
        {"date": "2021-09-10", "current_time": "08:19:20.199",
         "sunrise": "06:20", "sunset": "19:04",
         "moonrise": "10:22", "moonset": "21:11", ...}
    """

    def __init__(self, http_client: Optional[HTTPClient] = None,
                 base_url: str = DEFAULT_BASE_URL):
        self._http_client = http_client or AioHttpClient()
        self._base_url = base_url

    def get_source_name(self) -> str:
        return "ipgeolocation.io"

    async def fetch(self, lat: str, lon: str, api_key: str, target_date: date) -> RawSunMoonData:
        """
        Fetch raw astronomy data for a location and calendar date.

        Raises:
            AstronomyAuthenticationException: On HTTP 401/403
            AstronomyRateLimitException: On HTTP 429
            AstronomyDataException: When required fields are missing
            AstronomyAPIException: On any other non-200 status
        """
        params = {
            "apiKey": api_key,
            "lat": lat,
            "long": lon,
            "date": target_date.isoformat(),
        }
        logger.info(f"Fetching astronomy data for lat {lat}, lon {lon}, date {target_date}")

        response = await self._http_client.get(self._base_url, params)

        if response.status_code in (401, 403):
            raise AstronomyAuthenticationException("Invalid ipgeolocation API key")
        if response.status_code == 429:
            raise AstronomyRateLimitException("ipgeolocation API rate limit exceeded")
        if response.status_code != 200:
            raise AstronomyAPIException(
                f"ipgeolocation API returned status {response.status_code}"
            )
        if not response.data:
            raise AstronomyDataException("ipgeolocation API returned no data")

        try:
            return RawSunMoonData.from_api(response.data)
        except ValueError as e:
            raise AstronomyDataException(str(e))

    async def shutdown(self) -> None:
        await self._http_client.close()
