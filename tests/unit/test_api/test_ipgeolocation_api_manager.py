"""
Tests for the ipgeolocation.io astronomy API manager.
"""

import asyncio
import json
from datetime import date, datetime
from unittest.mock import AsyncMock, MagicMock, Mock

import aiohttp
import pytest

from version import get_user_agent
from sunmoon.api.ipgeolocation_api_manager import (
    DEFAULT_BASE_URL,
    AioHttpClient,
    AstronomyAPIException,
    AstronomyAPIResponse,
    AstronomyAuthenticationException,
    AstronomyDataException,
    AstronomyDataProvider,
    AstronomyNetworkException,
    AstronomyRateLimitException,
    HTTPClient,
    IPGeolocationProvider,
)
from sunmoon.models.sun_moon_data import RawSunMoonData


def _response(status_code, data):
    return AstronomyAPIResponse(
        status_code=status_code,
        data=data,
        timestamp=datetime.now(),
        source="ipgeolocation",
        url=DEFAULT_BASE_URL,
    )


@pytest.fixture
def http_client():
    return AsyncMock(spec=HTTPClient)


@pytest.fixture
def provider(http_client):
    return IPGeolocationProvider(http_client)


class TestExceptions:
    """Test the exception hierarchy."""

    @pytest.mark.parametrize(
        "exc_class",
        [
            AstronomyNetworkException,
            AstronomyDataException,
            AstronomyRateLimitException,
            AstronomyAuthenticationException,
        ],
    )
    def test_subclasses_base(self, exc_class):
        exc = exc_class("Test error")
        assert str(exc) == "Test error"
        assert isinstance(exc, AstronomyAPIException)


class TestIPGeolocationProvider:
    """Test the provider."""

    def test_is_data_provider(self, provider):
        assert isinstance(provider, AstronomyDataProvider)
        assert provider.get_source_name() == "ipgeolocation.io"

    @pytest.mark.asyncio
    async def test_fetch_success(self, provider, http_client, sample_payload):
        http_client.get.return_value = _response(200, sample_payload)

        raw = await provider.fetch("42.68", "-71.47", "test_key", date(2021, 9, 10))

        assert isinstance(raw, RawSunMoonData)
        assert raw.date == date(2021, 9, 10)
        assert raw.sunrise == "06:20"
        assert raw.moonset == "21:11"
        assert raw.extras["solar_noon"] == "12:42"
        http_client.get.assert_awaited_once_with(
            DEFAULT_BASE_URL,
            {"apiKey": "test_key", "lat": "42.68", "long": "-71.47", "date": "2021-09-10"},
        )

    @pytest.mark.asyncio
    async def test_custom_base_url(self, http_client, sample_payload):
        http_client.get.return_value = _response(200, sample_payload)
        provider = IPGeolocationProvider(http_client, base_url="http://localhost/astronomy")

        await provider.fetch("1", "2", "key", date(2021, 9, 10))

        assert http_client.get.await_args.args[0] == "http://localhost/astronomy"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status_code, exc_class",
        [
            (401, AstronomyAuthenticationException),
            (403, AstronomyAuthenticationException),
            (429, AstronomyRateLimitException),
            (500, AstronomyAPIException),
            (404, AstronomyAPIException),
        ],
    )
    async def test_status_mapping(self, provider, http_client, status_code, exc_class):
        http_client.get.return_value = _response(status_code, {"message": "error"})

        with pytest.raises(exc_class):
            await provider.fetch("42.68", "-71.47", "test_key", date(2021, 9, 10))

    @pytest.mark.asyncio
    async def test_missing_fields(self, provider, http_client, sample_payload):
        del sample_payload["moonrise"]
        http_client.get.return_value = _response(200, sample_payload)

        with pytest.raises(AstronomyDataException, match="moonrise"):
            await provider.fetch("42.68", "-71.47", "test_key", date(2021, 9, 10))

    @pytest.mark.asyncio
    async def test_empty_body(self, provider, http_client):
        http_client.get.return_value = _response(200, None)

        with pytest.raises(AstronomyDataException):
            await provider.fetch("42.68", "-71.47", "test_key", date(2021, 9, 10))

    @pytest.mark.asyncio
    async def test_network_error_propagates(self, provider, http_client):
        http_client.get.side_effect = AstronomyNetworkException("Network error")

        with pytest.raises(AstronomyNetworkException):
            await provider.fetch("42.68", "-71.47", "test_key", date(2021, 9, 10))

    @pytest.mark.asyncio
    async def test_shutdown_closes_client(self, provider, http_client):
        await provider.shutdown()
        http_client.close.assert_awaited_once()


class TestAioHttpClient:
    """Test AioHttpClient implementation."""

    def test_init_default_timeout(self):
        client = AioHttpClient()
        assert client._timeout.total == 5
        assert client._session is None

    def test_init_custom_timeout(self):
        client = AioHttpClient(timeout_seconds=12)
        assert client._timeout.total == 12

    @pytest.mark.asyncio
    async def test_ensure_session_sets_user_agent(self):
        client = AioHttpClient()
        session = await client._ensure_session()

        assert isinstance(session, aiohttp.ClientSession)
        assert session.headers["User-Agent"] == get_user_agent()
        assert await client._ensure_session() is session

        await client.close()
        assert session.closed

    def _client_with_session(self, session):
        client = AioHttpClient()
        session.closed = False
        session.close = AsyncMock()
        client._session = session
        return client

    @pytest.mark.asyncio
    async def test_get_success(self, sample_payload):
        response = Mock()
        response.status = 200
        response.url = "https://api.ipgeolocation.io/astronomy?lat=42.68"
        response.json = AsyncMock(return_value=sample_payload)

        context = MagicMock()
        context.__aenter__.return_value = response
        context.__aexit__.return_value = False

        session = Mock()
        session.get.return_value = context
        client = self._client_with_session(session)

        result = await client.get(DEFAULT_BASE_URL, {"lat": "42.68"})

        assert result.status_code == 200
        assert result.data == sample_payload
        assert result.source == "ipgeolocation"
        session.get.assert_called_once_with(DEFAULT_BASE_URL, params={"lat": "42.68"})

    @pytest.mark.asyncio
    async def test_get_client_error(self):
        session = Mock()
        session.get.side_effect = aiohttp.ClientError("connection refused")
        client = self._client_with_session(session)

        with pytest.raises(AstronomyNetworkException, match="Network error"):
            await client.get(DEFAULT_BASE_URL, {})

    @pytest.mark.asyncio
    async def test_get_timeout(self):
        session = Mock()
        session.get.side_effect = asyncio.TimeoutError()
        client = self._client_with_session(session)

        with pytest.raises(AstronomyNetworkException, match="timed out"):
            await client.get(DEFAULT_BASE_URL, {})

    @pytest.mark.asyncio
    async def test_get_invalid_json(self):
        response = Mock()
        response.status = 200
        response.url = DEFAULT_BASE_URL
        response.json = AsyncMock(side_effect=json.JSONDecodeError("Expecting value", "", 0))

        context = MagicMock()
        context.__aenter__.return_value = response
        context.__aexit__.return_value = False

        session = Mock()
        session.get.return_value = context
        client = self._client_with_session(session)

        with pytest.raises(AstronomyDataException, match="Invalid JSON"):
            await client.get(DEFAULT_BASE_URL, {})

    @pytest.mark.asyncio
    async def test_get_generic_exception(self):
        session = Mock()
        session.get.side_effect = Exception("Generic error")
        client = self._client_with_session(session)

        with pytest.raises(AstronomyAPIException, match="HTTP request failed"):
            await client.get(DEFAULT_BASE_URL, {})

    @pytest.mark.asyncio
    async def test_close_without_session(self):
        client = AioHttpClient()
        await client.close()
        assert client._session is None
