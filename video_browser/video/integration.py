"""
Video Module Integration.

Wires the delivery engine, the manifest and the library scanner together.
This module handles dependency injection and service composition.
"""

import logging
from typing import Optional

from ..core.config import Config
from ..storage.manifest import ManifestStore
from ..storage.scanner import LibraryScanner

# Domain interfaces
from .domain.interfaces import CodecProbe, ThumbnailExtractor, Transcoder, VideoRepository

# Infrastructure implementations
from .infrastructure.repositories import ManifestVideoRepository
from .infrastructure.transcoders import FFmpegTranscoder
from .infrastructure.metadata_extractors import FFprobeCodecProbe, OpenCVThumbnailExtractor

# Application services
from .application.delivery_policy import DeliveryPolicy
from .application.streaming_service import StreamingService
from .application.video_service import VideoService

# Presentation layer
from .presentation.controllers import StreamingController, VideoController
from .presentation.routes import create_video_routes


class VideoModule:
    """
    Main video module that provides dependency injection and service composition.

    Configuration is passed in explicitly; nothing below this class reads
    ambient settings.
    """

    def __init__(
        self,
        config: Config,
        manifest_store: Optional[ManifestStore] = None,
        transcoder: Optional[Transcoder] = None,
        thumbnail_extractor: Optional[ThumbnailExtractor] = None,
        codec_probe: Optional[CodecProbe] = None
    ):
        self.config = config
        self.manifest_store = manifest_store or ManifestStore(config.library.manifest_path)
        self.logger = logging.getLogger(__name__)

        self._initialize_services(transcoder, thumbnail_extractor, codec_probe)

        self.logger.info("Video module initialized successfully")

    def _initialize_services(
        self,
        transcoder: Optional[Transcoder],
        thumbnail_extractor: Optional[ThumbnailExtractor],
        codec_probe: Optional[CodecProbe]
    ) -> None:
        """Initialize all video services with proper dependency injection"""

        # Infrastructure layer
        self.video_repository: VideoRepository = ManifestVideoRepository(self.manifest_store)
        self.transcoder = transcoder or FFmpegTranscoder(self.config.streaming)
        self.thumbnail_extractor = thumbnail_extractor or OpenCVThumbnailExtractor()
        self.codec_probe = codec_probe or FFprobeCodecProbe(self.config.streaming.ffprobe_path)
        self.library_scanner = LibraryScanner(
            config=self.config.library,
            manifest_store=self.manifest_store,
            thumbnail_extractor=self.thumbnail_extractor,
            codec_probe=self.codec_probe
        )

        # Application layer
        self.delivery_policy = DeliveryPolicy(self.config.streaming.native_codec)

        self.streaming_service = StreamingService(
            video_repository=self.video_repository,
            delivery_policy=self.delivery_policy,
            transcoder=self.transcoder,
            config=self.config.streaming
        )

        self.video_service = VideoService(
            video_repository=self.video_repository,
            manifest_store=self.manifest_store,
            library_scanner=self.library_scanner,
            delivery_policy=self.delivery_policy
        )

        # Presentation layer
        self.streaming_controller = StreamingController(self.streaming_service)
        self.video_controller = VideoController(self.video_service)

    def get_api_routes(self):
        """Get FastAPI routes for video functionality"""
        return create_video_routes(
            video_controller=self.video_controller,
            streaming_controller=self.streaming_controller
        )

    def get_module_status(self) -> dict:
        """Get status information about the video module"""
        return {
            "video_repository": type(self.video_repository).__name__,
            "transcoder": type(self.transcoder).__name__,
            "transcoder_available": self.transcoder.is_available(),
            "thumbnail_extractor": type(self.thumbnail_extractor).__name__,
            "codec_probe": type(self.codec_probe).__name__,
            "native_codec": self.delivery_policy.native_codec,
            "manifest_path": self.manifest_store.manifest_path
        }


def create_video_module(config: Config) -> VideoModule:
    """
    Factory function to create a configured video module.

    This is the main entry point for mounting video functionality
    on the API server.
    """
    return VideoModule(config=config)
