"""
Video Module for the Video Browser.

This module provides range-aware video delivery and on-the-fly transcoding
following clean architecture principles. The composition root lives in
`video_browser.video.integration`.
"""

from .domain.models import ByPath, ById, ByteRange, DeliveryMode, VideoRecord, parse_range_header
from .application.delivery_policy import DeliveryPolicy
from .application.streaming_service import StreamingService

__all__ = ["ByPath", "ById", "ByteRange", "DeliveryMode", "VideoRecord", "parse_range_header", "DeliveryPolicy", "StreamingService"]
