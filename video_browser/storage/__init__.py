"""
Storage module for the Video Browser.

Handles the video manifest and the library scan that rebuilds it.
"""

from .manifest import ManifestStore
from .scanner import LibraryScanner, ScanReport

__all__ = ["ManifestStore", "LibraryScanner", "ScanReport"]
