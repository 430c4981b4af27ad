"""
Video API Routes.

FastAPI route definitions for video delivery and library management.
"""

from typing import Optional

from fastapi import APIRouter, Query, Request

from .controllers import StreamingController, VideoController
from .schemas import SuccessResponse, SyncResponse, ToggleVideoStatusRequest, VideoListResponse


def create_video_routes(
    video_controller: VideoController,
    streaming_controller: StreamingController
) -> APIRouter:
    """Create video API routes with dependency injection"""

    router = APIRouter(tags=["videos"])

    @router.get("/video")
    async def stream_video(
        request: Request,
        path: Optional[str] = Query(None, description="Absolute path of a video in the manifest"),
        id: Optional[str] = Query(None, description="Index of the video in the manifest")
    ):
        """
        Stream a video to the browser.

        Supports:
        - **Range requests**: 206 partial content for seeking, 416 when unsatisfiable
        - **Transcoding**: videos whose codec the browser cannot play are encoded on the fly
          (no seeking, length unknown)

        Usage in HTML5:
        ```html
        <video controls src="/video?id=0"></video>
        ```
        """
        # `id` is read as a string so a non-numeric value is a 400, not a validation error
        return await streaming_controller.stream_video(path, id, request)

    @router.get("/videos", response_model=VideoListResponse)
    async def list_videos():
        """List the manifest with the delivery mode of each video."""
        return await video_controller.list_videos()

    @router.post("/toggle-video-status", response_model=SuccessResponse)
    async def toggle_video_status(request: ToggleVideoStatusRequest):
        """
        Update the disabled flag of a video.

        - **videoPath**: absolute path of the video as listed in the manifest
        - **disabled**: new flag value
        """
        return await video_controller.toggle_video_status(request)

    @router.post("/sync", response_model=SyncResponse)
    async def sync_library():
        """
        Rescan the media library and rebuild the manifest.

        Disabled flags of videos already in the manifest are preserved and
        missing thumbnails are generated.
        """
        return await video_controller.sync()

    return router
