"""
Video Repository Implementations.

Manifest-backed lookup of video records and file system access to their bytes.
"""

import os
import stat
import logging
from typing import Any, AsyncIterator, Dict, List

import aiofiles

from ..domain.interfaces import VideoRepository
from ..domain.models import ByPath, ById, VideoIdentity, VideoRecord
from ..domain.results import ErrorKind, Result
from ...storage.manifest import ManifestStore


class ManifestVideoRepository(VideoRepository):
    """Video repository backed by the manifest file"""

    def __init__(self, manifest_store: ManifestStore):
        self.manifest_store = manifest_store
        self.logger = logging.getLogger(__name__)

    async def lookup(self, identity: VideoIdentity) -> Result[VideoRecord]:
        """Resolve an identity against a fresh read of the manifest"""
        if isinstance(identity, ById):
            entry = self.manifest_store.get_by_index(identity.index)
        elif isinstance(identity, ByPath):
            entry = self.manifest_store.find_by_path(identity.path)
        else:
            return Result.Err(ErrorKind.INVALID_REQUEST, f"Unsupported identity: {identity!r}")

        if entry is None:
            return Result.Err(ErrorKind.NOT_FOUND, f"Video {identity} not found in manifest")

        return Result.Ok(self._convert_to_record(identity, entry))

    async def list_records(self) -> List[VideoRecord]:
        return [self._convert_to_record(ById(index), entry) for index, entry in enumerate(self.manifest_store.load())]

    async def get_file_size(self, path: str) -> Result[int]:
        """Get file size, NOT_FOUND unless `path` is a regular file, IO_FAILURE if it cannot be read"""
        try:
            st = os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return Result.Err(ErrorKind.NOT_FOUND, f"Video file missing on disk: {path}")
        except OSError as e:
            self.logger.error(f"Error reading file size of {path}: {e}")
            return Result.Err(ErrorKind.IO_FAILURE, f"Could not read video file: {path}")

        if not stat.S_ISREG(st.st_mode):
            return Result.Err(ErrorKind.NOT_FOUND, f"Not a regular file: {path}")

        # Checked before any status line is sent, the body is read lazily
        if not os.access(path, os.R_OK):
            self.logger.error(f"Video file is not readable: {path}")
            return Result.Err(ErrorKind.IO_FAILURE, f"Could not read video file: {path}")

        return Result.Ok(st.st_size)

    async def iter_file_range(self, path: str, start: int, length: int, chunk_size: int) -> AsyncIterator[bytes]:
        """Stream `length` bytes from `start`, one bounded chunk at a time"""
        remaining = length
        try:
            async with aiofiles.open(path, "rb") as f:
                await f.seek(start)

                while remaining > 0:
                    chunk = await f.read(min(chunk_size, remaining))
                    if not chunk:
                        self.logger.warning(f"{path} ended {remaining} bytes early, file changed while streaming")
                        break
                    remaining -= len(chunk)
                    yield chunk
        except OSError as e:
            self.logger.error(f"Error streaming {path} at offset {start + length - remaining}: {e}")
            raise

    def _convert_to_record(self, identity: VideoIdentity, entry: Dict[str, Any]) -> VideoRecord:
        """Convert a manifest entry to the VideoRecord domain model"""
        codec = entry.get("codec")
        thumbnail = entry.get("thumbnail")
        return VideoRecord(
            identity=identity,
            path=entry["path"],
            disabled=bool(entry.get("disabled", False)),
            thumbnail=thumbnail if isinstance(thumbnail, str) else "",
            codec=codec.strip() if isinstance(codec, str) and codec.strip() else None
        )
