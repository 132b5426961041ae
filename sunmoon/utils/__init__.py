"""
Utility modules for Sun Moon Builder.
"""

from .image_writer import ImageWriter, SimpleImageWriter

__all__ = ["ImageWriter", "SimpleImageWriter"]
