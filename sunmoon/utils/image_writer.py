"""
Image output for Sun Moon Builder.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class ImageWriter(ABC):
    """Persists encoded images under a caller-supplied file name."""

    @abstractmethod
    def save_file(self, file_name: str, data: bytes) -> None:
        pass


class SimpleImageWriter(ImageWriter):
    """Writes images into a single directory."""

    def __init__(self, directory: str):
        """
        Initialize the writer, creating the output directory.

        A directory that cannot be created is logged; the failure surfaces
        again on the first save_file().
        """
        self.directory = Path(directory)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failure to create output directory {self.directory} - {e}")

    def save_file(self, file_name: str, data: bytes) -> None:
        """
        Write image bytes to directory/file_name.

        Raises:
            OSError: If the file cannot be written
        """
        full_name = self.directory / file_name
        full_name.write_bytes(data)
        logger.info(f"Wrote {len(data)} bytes to {full_name}")
