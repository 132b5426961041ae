"""
Sun Moon Builder

Renders a 24-hour "sun & moon" dial image for a location and date:
daylight and twilight arcs, the moon-up arc, current time markers,
and the lunar phase, from astronomy data fetched once per day and
cached on disk.
"""

from version import __version__

__author__ = "Sun Moon Builder Development Team"
__description__ = "Sun and moon dial image builder"
