"""
API module for the Video Browser.

This module provides the HTTP server hosting the video and library endpoints.
"""

from .server import APIServer

__all__ = ["APIServer"]
