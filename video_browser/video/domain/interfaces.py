"""
Video Domain Interfaces.

Abstract interfaces that define contracts for video operations.
These interfaces allow dependency inversion - domain logic doesn't depend on infrastructure.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import AsyncIterator, List, Optional, Tuple

from .models import VideoIdentity, VideoRecord
from .results import Result


class VideoRepository(ABC):
    """Abstract repository for manifest lookup and file access"""

    @abstractmethod
    async def lookup(self, identity: VideoIdentity) -> Result[VideoRecord]:
        """Resolve an identity to a video record"""
        pass

    @abstractmethod
    async def list_records(self) -> List[VideoRecord]:
        """Get all video records in manifest order"""
        pass

    @abstractmethod
    async def get_file_size(self, path: str) -> Result[int]:
        """Get the size of a video file in bytes"""
        pass

    @abstractmethod
    def iter_file_range(self, path: str, start: int, length: int, chunk_size: int) -> AsyncIterator[bytes]:
        """Stream `length` bytes of a file starting at `start`"""
        pass


class EncoderProcess(ABC):
    """Handle to a running transcoder process"""

    @property
    @abstractmethod
    def returncode(self) -> Optional[int]:
        pass

    @abstractmethod
    async def read_chunk(self) -> bytes:
        """Read the next chunk of encoded output, b'' at end of stream"""
        pass

    @abstractmethod
    async def wait(self) -> int:
        """Wait for the process to exit and return its exit code"""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Terminate the process if it is still running and release its pipes"""
        pass

    @abstractmethod
    def stderr_tail(self) -> str:
        """Last lines the process wrote to stderr"""
        pass

    async def __aenter__(self) -> "EncoderProcess":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


class Transcoder(ABC):
    """Abstract on-the-fly transcoder"""

    @abstractmethod
    async def spawn(self, source_path: str) -> Result[EncoderProcess]:
        """Start encoding `source_path` into a browser-playable stream"""
        pass

    @property
    @abstractmethod
    def content_type(self) -> str:
        """MIME type of the encoded stream"""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        pass


class ThumbnailExtractor(ABC):
    """Abstract thumbnail generator"""

    @abstractmethod
    async def extract_thumbnail(
        self,
        file_path: Path,
        timestamp_seconds: float = 1.0,
        size: Tuple[int, int] = (320, 240)
    ) -> Optional[bytes]:
        """Extract a JPEG thumbnail from a video"""
        pass


class CodecProbe(ABC):
    """Abstract codec detector"""

    @abstractmethod
    async def probe_codec(self, file_path: Path) -> Optional[str]:
        """Get the codec name of the first video stream"""
        pass

    def is_available(self) -> bool:
        return True
