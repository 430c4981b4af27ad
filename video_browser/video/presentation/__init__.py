"""
Video Presentation Layer.

Contains HTTP controllers, request/response models, and API route definitions.
"""

from .controllers import VideoController, StreamingController
from .schemas import VideoRecordResponse, VideoListResponse, ToggleVideoStatusRequest, SyncResponse
from .routes import create_video_routes

__all__ = [
    "VideoController",
    "StreamingController",
    "VideoRecordResponse",
    "VideoListResponse",
    "ToggleVideoStatusRequest",
    "SyncResponse",
    "create_video_routes",
]
