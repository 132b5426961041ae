"""
Caching for astronomy data.

Provides a file-backed cache so each location is fetched from the
astronomy provider at most once per calendar day.
"""

from .ttl_cache import TTLCache

__all__ = [
    'TTLCache',
]
