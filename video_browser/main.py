"""
Main Application Coordinator for the Video Browser.

Builds the video module and the HTTP server from one configuration file,
optionally rescans the library, and serves until SIGINT/SIGTERM.
"""

import asyncio
import signal
import threading
import logging
import sys
from typing import Optional
from datetime import datetime

from .core.config import Config
from .core.logging_config import setup_logging, get_error_tracker, get_performance_logger
from .video.integration import create_video_module
from .api.server import APIServer


class VideoBrowserSystem:
    """Application coordinator: configuration, video module and API server"""

    def __init__(self, config_file: Optional[str] = None):
        # Config logs through the default handler until setup_logging runs
        self.config = Config(config_file)

        self.logger_setup = setup_logging(log_level=self.config.system.log_level, log_file=self.config.system.log_file)
        self.logger = logging.getLogger(__name__)

        self.error_tracker = get_error_tracker("video_browser")
        self.performance_logger = get_performance_logger("video_browser")

        self.video_module = create_video_module(self.config)
        self.api_server = APIServer(self.config, self.video_module)

        self.running = False
        self.start_time: Optional[datetime] = None
        self._shutdown = threading.Event()

        self._setup_signal_handlers()

        self.logger.info(f"Video Browser initialized (manifest: {self.config.library.manifest_path})")

    def _setup_signal_handlers(self) -> None:
        def signal_handler(signum, frame):
            self.logger.info(f"Received signal {signum}, shutting down...")
            self._shutdown.set()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    def _check_external_tools(self) -> None:
        """Warn about missing ffmpeg/ffprobe, the server still starts without them"""
        status = self.video_module.get_module_status()
        if not status["transcoder_available"]:
            self.error_tracker.log_warning(
                f"{self.config.streaming.ffmpeg_path} not found, videos whose codec is not "
                f"{self.config.streaming.native_codec} cannot be played",
                "transcoder_check"
            )
        if not self.video_module.codec_probe.is_available():
            self.error_tracker.log_warning(f"{self.config.streaming.ffprobe_path} not found, library sync will not detect codecs", "codec_probe_check")

    def sync_library(self) -> bool:
        """Rescan the media library before serving"""
        result = asyncio.run(self.video_module.video_service.sync_library())
        if not result.ok:
            self.error_tracker.log_warning(result.error, "library_sync")
            return False

        report = result.data
        self.logger.info(f"Library synced: {report.videos_found} videos, {report.thumbnails_generated} new thumbnails")
        return True

    def start(self) -> bool:
        """Start serving, False when the API server could not be started"""
        if self.running:
            self.logger.warning("System is already running")
            return True

        with self.performance_logger.timed("system_startup"):
            self.start_time = datetime.now()
            self._check_external_tools()

            try:
                started = self.api_server.start()
            except Exception as e:
                self.error_tracker.log_error(e, "api_startup")
                return False

            if not started:
                self.error_tracker.log_warning("API server did not start", "api_startup")
                return False

            self.running = True

        self.logger.info(f"Serving on http://{self.config.system.api_host}:{self.config.system.api_port}")
        return True

    def stop(self) -> None:
        """Stop the API server, which also ends every open stream"""
        if not self.running:
            return

        self.logger.info("Stopping Video Browser...")
        self.running = False

        try:
            self.api_server.stop()
        except Exception as e:
            self.error_tracker.log_error(e, "api_shutdown")

        if self.start_time:
            uptime = (datetime.now() - self.start_time).total_seconds()
            self.logger.info(f"Video Browser stopped after {uptime:.1f} seconds")

    def run(self) -> None:
        """Run until a signal arrives or the server thread exits (blocking call)"""
        if not self.start():
            self.logger.error("Failed to start Video Browser")
            return

        try:
            self.logger.info("Press Ctrl+C to stop")
            while not self._shutdown.wait(timeout=1.0):
                if not self.api_server.is_running():
                    self.logger.error("API server exited unexpectedly")
                    break
        finally:
            self.stop()


def main():
    """Command line entry point"""
    import argparse

    parser = argparse.ArgumentParser(description="Stream and transcode a local video library for the browser")
    parser.add_argument("--config", type=str, help="Path to configuration file", default="config.json")
    parser.add_argument("--log-level", type=str, choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Override log level", default=None)
    parser.add_argument("--sync", action="store_true", help="Rescan the media library before serving")

    args = parser.parse_args()

    system = VideoBrowserSystem(args.config)

    if args.log_level:
        logging.getLogger().setLevel(getattr(logging, args.log_level))

    try:
        if args.sync:
            system.sync_library()
        system.run()
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
