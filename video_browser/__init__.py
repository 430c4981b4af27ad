"""
Video Browser

Serves a local video library to a browser: direct streaming with byte-range
seeking, on-the-fly transcoding for codecs the browser cannot play, and a
manifest of the library with thumbnails.
"""

__version__ = "1.0.0"
__author__ = "Video Browser Team"

from .main import VideoBrowserSystem

__all__ = ["VideoBrowserSystem"]
