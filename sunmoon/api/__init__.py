"""
API integration for Sun Moon Builder.

This module handles communication with the astronomy data provider,
including timeouts, error handling and response parsing.
"""

from .ipgeolocation_api_manager import (
    AstronomyAPIException,
    AstronomyNetworkException,
    AstronomyDataException,
    AstronomyRateLimitException,
    AstronomyAuthenticationException,
    AstronomyAPIResponse,
    HTTPClient,
    AioHttpClient,
    AstronomyDataProvider,
    IPGeolocationProvider,
)

__all__ = [
    "AstronomyAPIException",
    "AstronomyNetworkException",
    "AstronomyDataException",
    "AstronomyRateLimitException",
    "AstronomyAuthenticationException",
    "AstronomyAPIResponse",
    "HTTPClient",
    "AioHttpClient",
    "AstronomyDataProvider",
    "IPGeolocationProvider",
]
