"""
Video API Request/Response Schemas.

Pydantic models for API serialization and validation.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class VideoRecordResponse(BaseModel):
    """Manifest entry as returned by the listing endpoint"""
    id: int = Field(..., description="Index of the video in the manifest")
    path: str = Field(..., description="Absolute path of the video file")
    disabled: bool = Field(..., description="Whether the video is hidden in the browser")
    thumbnail: str = Field("", description="Thumbnail URL")
    codec: Optional[str] = Field(None, description="Codec of the first video stream, if known")
    delivery_mode: str = Field(..., description="direct or transcode")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": 0,
            "path": "/home/user/videos/a.mp4",
            "disabled": False,
            "thumbnail": "/thumbnails/a.mp4.jpg",
            "codec": "h264",
            "delivery_mode": "direct"
        }
    })


class VideoListResponse(BaseModel):
    """Video list response"""
    videos: List[VideoRecordResponse] = Field(..., description="Videos in manifest order")
    total_count: int = Field(..., description="Total number of videos")


class ToggleVideoStatusRequest(BaseModel):
    """Disable or re-enable a video"""
    # Optional so a missing field is reported as 400 rather than a validation error
    videoPath: Optional[str] = Field(None, description="Absolute path of the video in the manifest")
    disabled: Optional[bool] = Field(None, description="New disabled flag")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "videoPath": "/home/user/videos/a.mp4",
            "disabled": True
        }
    })


class SuccessResponse(BaseModel):
    """Generic success response"""
    success: bool = True
    message: str


class SyncResponse(SuccessResponse):
    """Library sync response"""
    videos_found: int = Field(..., description="Videos written to the manifest")
    thumbnails_generated: int = Field(0, description="Thumbnails created during this sync")
    thumbnails_failed: int = Field(0, description="Videos whose thumbnail could not be created")
    codecs_probed: int = Field(0, description="Videos whose codec was detected during this sync")
