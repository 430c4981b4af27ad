"""
Video Domain Layer.

Contains pure business logic and domain models for media delivery.
No external dependencies - only Python standard library and domain concepts.
"""

from .models import (
    ByPath,
    ById,
    ByteRange,
    DeliveryMode,
    RangeOutcome,
    RangeStatus,
    VideoIdentity,
    VideoRecord,
    identity_from_query,
    parse_range_header,
)
from .results import ErrorKind, Result
from .interfaces import VideoRepository, Transcoder, EncoderProcess, ThumbnailExtractor, CodecProbe

__all__ = [
    "ByPath",
    "ById",
    "ByteRange",
    "DeliveryMode",
    "RangeOutcome",
    "RangeStatus",
    "VideoIdentity",
    "VideoRecord",
    "identity_from_query",
    "parse_range_header",
    "ErrorKind",
    "Result",
    "VideoRepository",
    "Transcoder",
    "EncoderProcess",
    "ThumbnailExtractor",
    "CodecProbe",
]
