"""
Version information for Sun Moon Builder.

Centralized version management for the dial renderer, the astronomy data
service and the command-line entry point.
"""

# Core application information
__version__ = "1.1.0"
__version_info__ = (1, 1, 0)
__app_name__ = "SunMoonBuilder"
__app_display_name__ = "Sun Moon Builder - 24 Hour Sun & Moon Dial Images"
__description__ = "Creates JPEG dial images with sunrise/sunset, moonrise/moonset and lunar phase data"

# Astronomy data information
__astronomy_api_provider__ = "ipgeolocation.io"
__astronomy_api_url__ = "https://api.ipgeolocation.io/astronomy"

__license__ = "ISC"


def get_version_string() -> str:
    """Get formatted version string."""
    return f"{__app_name__} v{__version__}"


def get_user_agent() -> str:
    """Get the User-Agent sent to the astronomy provider."""
    return f"{__app_name__}/{__version__}"


def get_astronomy_info() -> dict:
    """Get astronomy provider information."""
    return {
        "version": __version__,
        "provider": __astronomy_api_provider__,
        "api_url": __astronomy_api_url__,
        "api_key_required": True,
    }
