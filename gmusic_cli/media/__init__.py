"""
Media Layer.

This package is responsible for writing downloaded audio to local storage.
"""

from .downloader import SongWriter

__all__ = ["SongWriter"]
