"""
Logging configuration for the Video Browser.

Console output is colored, the optional log file rotates, and each component
(delivery engine, library scanner, HTTP server) gets its own level. Encoder
stderr is logged at DEBUG by the transcoder, so `--log-level DEBUG` shows it.
"""

import logging
import logging.handlers
import os
import sys
import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Tuple

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"

# logger name -> (level when debugging, level otherwise)
COMPONENT_LEVELS: Dict[str, Tuple[int, int]] = {
    "video_browser.video": (logging.DEBUG, logging.INFO),
    "video_browser.storage": (logging.DEBUG, logging.INFO),
    "video_browser.api": (logging.DEBUG, logging.INFO),
    "uvicorn": (logging.INFO, logging.WARNING),
    "uvicorn.access": (logging.INFO, logging.WARNING),
    "fastapi": (logging.INFO, logging.WARNING),
}


class ColoredFormatter(logging.Formatter):
    """Colored formatter for console output"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record):
        levelname = record.levelname
        color = self.COLORS.get(levelname)
        if color:
            record.levelname = f"{color}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # The file handler formats the same record
            record.levelname = levelname


class VideoBrowserLogger:
    """Root logger setup for the Video Browser"""

    def __init__(self, log_level: str = "INFO", log_file: Optional[str] = None,
                 enable_console: bool = True, enable_rotation: bool = True,
                 max_bytes: int = 10 * 1024 * 1024, backup_count: int = 5):
        self.log_level = log_level.upper()
        self.log_file = log_file
        self.enable_console = enable_console
        self.enable_rotation = enable_rotation
        self.max_bytes = max_bytes
        self.backup_count = backup_count

        self._setup_logging()

    @property
    def level(self) -> int:
        level = logging.getLevelName(self.log_level)
        # Unknown names come back as "Level <name>"
        return level if isinstance(level, int) else logging.INFO

    def _setup_logging(self) -> None:
        root_logger = logging.getLogger()
        root_logger.setLevel(self.level)
        root_logger.handlers.clear()

        if self.enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(self.level)
            console_handler.setFormatter(ColoredFormatter(LOG_FORMAT))
            root_logger.addHandler(console_handler)

        if self.log_file:
            file_handler = self._create_file_handler()
            if file_handler is not None:
                root_logger.addHandler(file_handler)

        self._setup_component_loggers()

        logging.getLogger(__name__).info(f"Logging initialized - Level: {self.log_level}, File: {self.log_file}")

    def _create_file_handler(self) -> Optional[logging.Handler]:
        """File handler receiving every message, rotated by size"""
        try:
            log_dir = os.path.dirname(self.log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)

            if self.enable_rotation:
                handler = logging.handlers.RotatingFileHandler(self.log_file, maxBytes=self.max_bytes, backupCount=self.backup_count)
            else:
                handler = logging.FileHandler(self.log_file)
        except OSError as e:
            print(f"Warning: Could not setup file logging: {e}", file=sys.stderr)
            return None

        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        return handler

    def _setup_component_loggers(self) -> None:
        debug = self.log_level == "DEBUG"
        for name, (debug_level, normal_level) in COMPONENT_LEVELS.items():
            logging.getLogger(name).setLevel(debug_level if debug else normal_level)

    @staticmethod
    def setup_exception_logging():
        """Route uncaught exceptions to the log"""

        def handle_exception(exc_type, exc_value, exc_traceback):
            if issubclass(exc_type, KeyboardInterrupt):
                sys.__excepthook__(exc_type, exc_value, exc_traceback)
                return

            logging.getLogger("uncaught_exception").critical(
                "Uncaught exception",
                exc_info=(exc_type, exc_value, exc_traceback)
            )

        sys.excepthook = handle_exception


class PerformanceLogger:
    """Times named operations, several may run at once"""

    def __init__(self, name: str):
        self.logger = logging.getLogger(f"performance.{name}")
        self._started: Dict[str, float] = {}

    def start_timer(self, operation: str) -> None:
        self._started[operation] = time.monotonic()
        self.logger.debug(f"Started: {operation}")

    def end_timer(self, operation: str) -> float:
        """Stop the timer of `operation` and log its duration"""
        started = self._started.pop(operation, None)
        if started is None:
            self.logger.warning(f"Timer not started for: {operation}")
            return 0.0

        duration = time.monotonic() - started
        self.logger.info(f"Completed: {operation} in {duration:.3f}s")
        return duration

    @contextmanager
    def timed(self, operation: str) -> Iterator[None]:
        self.start_timer(operation)
        try:
            yield
        finally:
            self.end_timer(operation)


class ErrorTracker:
    """Logs errors and warnings with the component and context they came from"""

    def __init__(self, component_name: str):
        self.component_name = component_name
        self.logger = logging.getLogger(f"errors.{component_name}")

    def _describe(self, kind: str, context: str, message: str) -> str:
        where = f"{self.component_name} ({context})" if context else self.component_name
        return f"{kind} in {where}: {message}"

    def log_error(self, error: Exception, context: str = "",
                  additional_data: Optional[dict] = None) -> None:
        message = self._describe("Error", context, str(error))
        if additional_data:
            message += f" | Data: {additional_data}"

        # Only attach a traceback when called from an except block
        self.logger.error(message, exc_info=sys.exc_info()[0] is not None)

    def log_warning(self, message: str, context: str = "") -> None:
        self.logger.warning(self._describe("Warning", context, message))


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> VideoBrowserLogger:
    """Setup logging for the entire application"""
    logger_setup = VideoBrowserLogger(log_level=log_level, log_file=log_file)
    VideoBrowserLogger.setup_exception_logging()
    return logger_setup


def get_performance_logger(component_name: str) -> PerformanceLogger:
    return PerformanceLogger(component_name)


def get_error_tracker(component_name: str) -> ErrorTracker:
    return ErrorTracker(component_name)
