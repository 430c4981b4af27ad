"""
Video Domain Models.

Pure business entities and value objects for media delivery.
These models contain no external dependencies and represent core business concepts.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .results import ErrorKind, Result

_RANGE_RE = re.compile(r"^bytes=(\d+)-(\d*)$", re.ASCII | re.IGNORECASE)
_INDEX_RE = re.compile(r"^\d+$", re.ASCII)


class DeliveryMode(Enum):
    """How a video is delivered to the browser"""
    DIRECT = "direct"
    TRANSCODE = "transcode"


@dataclass(frozen=True)
class ByPath:
    """Video identified by its absolute filesystem path"""
    path: str

    def __str__(self) -> str:
        return f"path={self.path}"


@dataclass(frozen=True)
class ById:
    """Video identified by its index in the manifest"""
    index: int

    def __str__(self) -> str:
        return f"id={self.index}"


VideoIdentity = Union[ByPath, ById]


def identity_from_query(path: Optional[str], video_id: Optional[str]) -> Result[VideoIdentity]:
    """Build a VideoIdentity from the `path` / `id` query parameters"""
    if path and video_id is not None:
        return Result.Err(ErrorKind.INVALID_REQUEST, "Specify either 'path' or 'id', not both")

    if video_id is not None:
        video_id = video_id.strip()
        if not _INDEX_RE.match(video_id):
            return Result.Err(ErrorKind.INVALID_REQUEST, f"Invalid video id: {video_id!r}")
        return Result.Ok(ById(int(video_id)))

    if path:
        return Result.Ok(ByPath(path))

    return Result.Err(ErrorKind.INVALID_REQUEST, "Missing 'path' or 'id' query parameter")


@dataclass(frozen=True)
class VideoRecord:
    """Manifest entry for one video, immutable for the duration of a request"""
    identity: VideoIdentity
    path: str
    disabled: bool = False
    thumbnail: str = ""
    codec: Optional[str] = None


@dataclass(frozen=True)
class ByteRange:
    """Concrete byte interval of a file, both ends inclusive"""
    start: int
    end: int
    total: int

    def __post_init__(self):
        if self.total <= 0:
            raise ValueError("Total size must be positive")
        if self.start < 0:
            raise ValueError("Start byte cannot be negative")
        if self.end < self.start:
            raise ValueError("End byte cannot be less than start byte")
        if self.end > self.total - 1:
            raise ValueError("End byte cannot be past the end of the file")

    @property
    def length(self) -> int:
        """Get range size in bytes"""
        return self.end - self.start + 1

    @property
    def content_range(self) -> str:
        """Content-Range header value"""
        return f"bytes {self.start}-{self.end}/{self.total}"


class RangeStatus(Enum):
    """Outcome category of Range header parsing"""
    NO_RANGE = "no_range"
    SATISFIED = "satisfied"
    UNSATISFIABLE = "unsatisfiable"


@dataclass(frozen=True)
class RangeOutcome:
    """Result of parsing a Range header against a file size"""
    status: RangeStatus
    total: int
    byte_range: Optional[ByteRange] = None

    @classmethod
    def no_range(cls, total: int) -> "RangeOutcome":
        return cls(status=RangeStatus.NO_RANGE, total=total)

    @classmethod
    def satisfied(cls, byte_range: ByteRange) -> "RangeOutcome":
        return cls(status=RangeStatus.SATISFIED, total=byte_range.total, byte_range=byte_range)

    @classmethod
    def unsatisfiable(cls, total: int) -> "RangeOutcome":
        return cls(status=RangeStatus.UNSATISFIABLE, total=total)

    @property
    def unsatisfied_content_range(self) -> str:
        """Content-Range header value for a 416 response"""
        return f"bytes */{self.total}"


def parse_range_header(range_header: Optional[str], total_size: int) -> RangeOutcome:
    """
    Parse an HTTP Range header of the form ``bytes=<start>-[<end>]``.

    Suffix ranges, multiple ranges and other units are not supported and are
    reported as unsatisfiable, as is any start at or past the end of the file.
    An end past the end of the file is clamped to the last byte.
    """
    if range_header is None:
        return RangeOutcome.no_range(total_size)

    match = _RANGE_RE.match(range_header.strip())
    if not match:
        return RangeOutcome.unsatisfiable(total_size)

    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else total_size - 1

    if start >= total_size or start > end:
        return RangeOutcome.unsatisfiable(total_size)

    end = min(end, total_size - 1)
    return RangeOutcome.satisfied(ByteRange(start=start, end=end, total=total_size))
