"""
Video Application Service.

Orchestrates the library management use cases: listing the manifest,
toggling a video's disabled flag and rescanning the library.
"""

import logging
from typing import List, Tuple

from ..domain.interfaces import VideoRepository
from ..domain.models import DeliveryMode, VideoRecord
from ..domain.results import ErrorKind, Result
from .delivery_policy import DeliveryPolicy
from ...storage.manifest import ManifestStore
from ...storage.scanner import LibraryScanner, ScanReport


class VideoService:
    """Application service for video library management"""

    def __init__(
        self,
        video_repository: VideoRepository,
        manifest_store: ManifestStore,
        library_scanner: LibraryScanner,
        delivery_policy: DeliveryPolicy
    ):
        self.video_repository = video_repository
        self.manifest_store = manifest_store
        self.library_scanner = library_scanner
        self.delivery_policy = delivery_policy
        self.logger = logging.getLogger(__name__)

    async def list_videos(self) -> List[Tuple[VideoRecord, DeliveryMode]]:
        """Get all manifest records with the delivery mode each would use"""
        try:
            records = await self.video_repository.list_records()
            return [(record, self.delivery_policy.decide(record)) for record in records]

        except Exception as e:
            self.logger.error(f"Error listing videos: {e}")
            return []

    async def set_video_disabled(self, path: str, disabled: bool) -> Result[bool]:
        """Update the disabled flag of the video at `path`"""
        try:
            if not self.manifest_store.set_disabled(path, disabled):
                return Result.Err(ErrorKind.NOT_FOUND, "Video not found in manifest")
            return Result.Ok(disabled)

        except Exception as e:
            self.logger.error(f"Error writing video manifest: {e}")
            return Result.Err(ErrorKind.IO_FAILURE, "Error writing video manifest")

    async def sync_library(self) -> Result[ScanReport]:
        """Rescan the library and rebuild the manifest"""
        try:
            return Result.Ok(await self.library_scanner.scan())

        except Exception as e:
            self.logger.error(f"Error syncing video library: {e}")
            return Result.Err(ErrorKind.IO_FAILURE, f"Sync failed: {e}")
