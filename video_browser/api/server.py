"""
FastAPI Server for the Video Browser.

This module serves the video delivery endpoints, the library management
endpoints and the static browser front end.
"""

import asyncio
import logging
import os
import threading
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import uvicorn

from ..core.config import Config
from ..video.integration import VideoModule


class APIServer:
    """FastAPI server for the Video Browser"""

    def __init__(self, config: Config, video_module: VideoModule):
        self.config = config
        self.video_module = video_module
        self.logger = logging.getLogger(__name__)

        # FastAPI app
        self.app = FastAPI(title="Video Browser API", description="Stream, transcode and manage a local video library", version="1.0.0")

        # Server state
        self.server_start_time = datetime.now()
        self.running = False
        self._server: Optional[uvicorn.Server] = None
        self._server_thread: Optional[threading.Thread] = None

        if self.config.system.enable_cors:
            self.app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=True, allow_methods=["*"], allow_headers=["*"])

        # Setup routes
        self._setup_routes()

    def _setup_routes(self):
        """Setup API routes"""

        @self.app.get("/health")
        async def health_check():
            return {
                "status": "healthy",
                "timestamp": datetime.now().isoformat(),
                "server": self.get_server_info(),
                "video_module": self.video_module.get_module_status()
            }

        self.app.include_router(self.video_module.get_api_routes())
        self.logger.info("Video routes registered")

        # Mounted last so API routes take precedence over same-named files
        public_dir = self.config.library.public_dir
        if os.path.isdir(public_dir):
            self.app.mount("/", StaticFiles(directory=public_dir, html=True), name="public")
            self.logger.info(f"Serving static files from {public_dir}")
        else:
            self.logger.warning(f"Public directory {public_dir} not found, static files disabled")

    def start(self) -> bool:
        """Start the API server"""
        if self.running:
            self.logger.warning("API server is already running")
            return True

        if not self.config.system.enable_api:
            self.logger.info("API server disabled in configuration")
            return False

        try:
            self.logger.info(f"Starting API server on {self.config.system.api_host}:{self.config.system.api_port}")
            self.running = True

            # Start server in separate thread
            self._server_thread = threading.Thread(target=self._run_server, daemon=True)
            self._server_thread.start()

            return True

        except Exception as e:
            self.logger.error(f"Error starting API server: {e}")
            self.running = False
            return False

    def stop(self) -> None:
        """Stop the API server"""
        if not self.running:
            return

        self.logger.info("Stopping API server...")
        self.running = False

        if self._server is not None:
            # Uvicorn drains open connections, which also closes running encoders
            self._server.should_exit = True
        if self._server_thread is not None:
            self._server_thread.join(timeout=self.config.streaming.terminate_timeout_seconds + 5)

        self.logger.info("API server stopped")

    def _run_server(self) -> None:
        """Run the uvicorn server"""
        try:
            server_config = uvicorn.Config(self.app, host=self.config.system.api_host, port=self.config.system.api_port, log_level=self.config.system.log_level.lower())
            self._server = uvicorn.Server(server_config)
            # Signal handling stays with the main thread
            self._server.install_signal_handlers = lambda: None

            loop = asyncio.new_event_loop()
            asyncio.set_event_loop(loop)
            try:
                loop.run_until_complete(self._server.serve())
            finally:
                loop.close()
        except Exception as e:
            self.logger.error(f"Error running API server: {e}")
        finally:
            self.running = False
            self._server = None

    def is_running(self) -> bool:
        """Check if API server is running"""
        return self.running

    def get_server_info(self) -> Dict[str, Any]:
        """Get server information"""
        return {
            "running": self.running,
            "host": self.config.system.api_host,
            "port": self.config.system.api_port,
            "start_time": self.server_start_time.isoformat(),
            "uptime_seconds": (datetime.now() - self.server_start_time).total_seconds(),
            "public_dir": self.config.library.public_dir
        }
