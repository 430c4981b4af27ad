"""
Library Scanner for the Video Browser.

Walks the media library for video files, generates missing thumbnails, probes codecs
and rewrites the manifest while preserving the disabled flags of known videos.
"""

import os
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from pathlib import Path

from ..core.config import LibraryConfig
from ..core.logging_config import get_performance_logger
from ..video.domain.interfaces import CodecProbe, ThumbnailExtractor
from .manifest import ManifestStore


@dataclass
class ScanReport:
    """Summary of one library scan"""

    videos_found: int
    thumbnails_generated: int
    thumbnails_failed: int
    codecs_probed: int


class LibraryScanner:
    """Discovers video files and rebuilds the manifest"""

    def __init__(
        self,
        config: LibraryConfig,
        manifest_store: ManifestStore,
        thumbnail_extractor: Optional[ThumbnailExtractor] = None,
        codec_probe: Optional[CodecProbe] = None
    ):
        self.config = config
        self.manifest_store = manifest_store
        self.thumbnail_extractor = thumbnail_extractor
        self.codec_probe = codec_probe
        self.logger = logging.getLogger(__name__)
        self.performance_logger = get_performance_logger("library_scan")

        self._extensions = {ext.lower() for ext in config.video_extensions}
        self._scan_lock = asyncio.Lock()

    async def scan(self) -> ScanReport:
        """Rescan the library and write a new manifest"""
        async with self._scan_lock:
            self.logger.info(f"Scanning for videos in {self.config.scan_root}")

            with self.performance_logger.timed("library_scan"):
                existing_flags = self.manifest_store.disabled_flags()
                known_codecs = self.manifest_store.known_codecs()

                paths = await asyncio.get_event_loop().run_in_executor(None, self.find_videos, self.config.scan_root)

                entries: List[Dict[str, Any]] = []
                generated = failed = probed = 0

                for path in paths:
                    entry = {"path": path, "disabled": existing_flags.get(path, False), "thumbnail": self.thumbnail_url(path)}

                    outcome = await self._ensure_thumbnail(path)
                    if outcome is True:
                        generated += 1
                    elif outcome is False:
                        failed += 1

                    codec = known_codecs.get(path)
                    if codec is None and self.codec_probe is not None and self.config.probe_codecs:
                        codec = await self.codec_probe.probe_codec(Path(path))
                        if codec:
                            probed += 1
                    if codec:
                        entry["codec"] = codec

                    entries.append(entry)

                self.manifest_store.replace(entries)

            self.logger.info(f"Found {len(entries)} videos. Manifest created.")
            return ScanReport(videos_found=len(entries), thumbnails_generated=generated, thumbnails_failed=failed, codecs_probed=probed)

    def find_videos(self, root: str) -> List[str]:
        """Recursively find video files under `root`, skipping unreadable entries"""
        videos: List[str] = []

        def on_error(error: OSError) -> None:
            self.logger.debug(f"Skipping unreadable directory: {error}")

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            # Prune excluded directories in place so os.walk does not descend into them
            dirnames[:] = sorted(d for d in dirnames if not self._is_excluded(os.path.join(dirpath, d)))

            for filename in sorted(filenames):
                if os.path.splitext(filename)[1].lower() not in self._extensions:
                    continue
                full_path = os.path.join(dirpath, filename)
                if os.path.isfile(full_path):
                    videos.append(full_path)

        return videos

    def thumbnail_url(self, video_path: str) -> str:
        return f"{self.config.thumbnail_url_prefix.rstrip('/')}/{os.path.basename(video_path)}.jpg"

    def thumbnail_path(self, video_path: str) -> Path:
        return Path(self.config.thumbnail_dir) / f"{os.path.basename(video_path)}.jpg"

    def _is_excluded(self, path: str) -> bool:
        return any(name in path for name in self.config.excluded_dirs)

    async def _ensure_thumbnail(self, video_path: str) -> Optional[bool]:
        """Generate the thumbnail if missing: None when skipped, else success"""
        target = self.thumbnail_path(video_path)
        if target.exists() or self.thumbnail_extractor is None:
            return None

        self.logger.info(f"Generating thumbnail for {video_path}...")
        data = await self.thumbnail_extractor.extract_thumbnail(
            Path(video_path),
            timestamp_seconds=self.config.thumbnail_timestamp_seconds,
            size=tuple(self.config.thumbnail_size)
        )
        if not data:
            # Corrupt or unreadable video, keep going with the rest of the library
            self.logger.error(f"Failed to generate thumbnail for {video_path}")
            return False

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            self.logger.error(f"Could not write thumbnail {target}: {e}")
            return False

        self.logger.info(f"Thumbnail generated for {video_path}")
        return True
