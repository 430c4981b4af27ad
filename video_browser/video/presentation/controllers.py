"""
Video HTTP Controllers.

Handle HTTP requests and responses for video operations.
"""

import asyncio
import logging
from typing import Awaitable, Callable, NoReturn, Optional

from fastapi import HTTPException, Request, Response
from fastapi.responses import StreamingResponse

from ..application.streaming_service import StreamingService
from ..application.video_service import VideoService
from ..domain.models import DeliveryMode
from ..domain.results import ErrorKind, Result
from .schemas import SuccessResponse, SyncResponse, ToggleVideoStatusRequest, VideoListResponse, VideoRecordResponse

ERROR_STATUS = {
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNSATISFIABLE_RANGE: 416,
    ErrorKind.UPSTREAM_PROCESS_FAILURE: 500,
    ErrorKind.IO_FAILURE: 500,
}


def raise_for_result(result: Result) -> NoReturn:
    """Translate a failed Result into an HTTPException"""
    raise HTTPException(status_code=ERROR_STATUS.get(result.kind, 500), detail=result.error)


class ScopedStreamingResponse(StreamingResponse):
    """StreamingResponse that releases its source however the response ends"""

    def __init__(self, content, on_close: Callable[[], Awaitable[None]], **kwargs):
        super().__init__(content, **kwargs)
        self.on_close = on_close

    async def __call__(self, scope, receive, send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            # The body iterator never runs if the client left before the status line was sent
            await asyncio.shield(self.on_close())


class StreamingController:
    """Controller for video delivery"""

    def __init__(self, streaming_service: StreamingService):
        self.streaming_service = streaming_service
        self.logger = logging.getLogger(__name__)

    async def stream_video(self, path: Optional[str], video_id: Optional[str], request: Request) -> Response:
        """Stream a video directly with range support, or through the transcoder"""
        record = await self.streaming_service.resolve_video(path, video_id)
        if not record.ok:
            raise_for_result(record)

        video = record.data
        mode = self.streaming_service.choose_delivery(video)

        if mode == DeliveryMode.TRANSCODE:
            # Transcoded output is not seekable, any Range header is ignored
            stream = await self.streaming_service.open_transcode(video)
            if not stream.ok:
                raise_for_result(stream)

            self.logger.info(f"Transcoding {video.path} (codec {video.codec})")
            return ScopedStreamingResponse(
                stream.data.iter_bytes(),
                on_close=stream.data.close,
                status_code=200,
                headers={"Cache-Control": "no-store"},
                media_type=stream.data.content_type
            )

        range_header = request.headers.get("range")
        stream = await self.streaming_service.open_direct(video, range_header)
        if not stream.ok:
            if stream.kind == ErrorKind.UNSATISFIABLE_RANGE:
                response = Response(status_code=416, headers={"Content-Range": stream.meta["content_range"]})
                # No body, and a zero Content-Length must not be advertised
                del response.headers["content-length"]
                return response
            raise_for_result(stream)

        direct = stream.data
        self.logger.debug(f"Streaming {video.path} status={direct.status_code} length={direct.content_length}")
        return StreamingResponse(
            direct.iter_bytes(),
            status_code=direct.status_code,
            headers=direct.headers,
            media_type=direct.content_type
        )


class VideoController:
    """Controller for library management operations"""

    def __init__(self, video_service: VideoService):
        self.video_service = video_service
        self.logger = logging.getLogger(__name__)

    async def list_videos(self) -> VideoListResponse:
        """List manifest entries"""
        videos = await self.video_service.list_videos()

        video_responses = [
            VideoRecordResponse(
                id=record.identity.index,
                path=record.path,
                disabled=record.disabled,
                thumbnail=record.thumbnail,
                codec=record.codec,
                delivery_mode=mode.value
            )
            for record, mode in videos
        ]

        return VideoListResponse(videos=video_responses, total_count=len(video_responses))

    async def toggle_video_status(self, request: ToggleVideoStatusRequest) -> SuccessResponse:
        """Update the disabled flag of one video"""
        if not request.videoPath or request.disabled is None:
            raise HTTPException(status_code=400, detail="Missing videoPath or disabled status")

        result = await self.video_service.set_video_disabled(request.videoPath, request.disabled)
        if not result.ok:
            raise_for_result(result)

        return SuccessResponse(message="Video status updated")

    async def sync(self) -> SyncResponse:
        """Rescan the library"""
        result = await self.video_service.sync_library()
        if not result.ok:
            raise_for_result(result)

        report = result.data
        return SyncResponse(
            message="Sync complete",
            videos_found=report.videos_found,
            thumbnails_generated=report.thumbnails_generated,
            thumbnails_failed=report.thumbnails_failed,
            codecs_probed=report.codecs_probed
        )
