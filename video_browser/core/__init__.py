"""
Video Browser - Core Module

This module contains configuration management and logging setup shared by
the delivery engine, the library scanner and the HTTP server.
"""

__version__ = "1.0.0"

from .config import Config, LibraryConfig, StreamingConfig, SystemConfig
from .logging_config import setup_logging, get_error_tracker, get_performance_logger

__all__ = ["Config", "LibraryConfig", "StreamingConfig", "SystemConfig", "setup_logging", "get_error_tracker", "get_performance_logger"]
