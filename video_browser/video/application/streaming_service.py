"""
Video Streaming Application Service.

Handles the delivery use case: identity resolution, delivery mode selection,
byte-range streaming of files and piping of transcoder output.
"""

import asyncio
import logging
import mimetypes
import os
from typing import AsyncIterator, Dict, Optional

from ..domain.interfaces import EncoderProcess, Transcoder, VideoRepository
from ..domain.models import (
    DeliveryMode,
    RangeOutcome,
    RangeStatus,
    VideoRecord,
    identity_from_query,
    parse_range_header,
)
from ..domain.results import ErrorKind, Result
from .delivery_policy import DeliveryPolicy
from ...core.config import StreamingConfig


class DirectStream:
    """Plan for sending a file, or a span of it, unchanged"""

    def __init__(
        self,
        video_repository: VideoRepository,
        path: str,
        range_outcome: RangeOutcome,
        content_type: str,
        chunk_size: int
    ):
        self.video_repository = video_repository
        self.path = path
        self.range_outcome = range_outcome
        self.content_type = content_type
        self.chunk_size = chunk_size

    @property
    def is_partial(self) -> bool:
        return self.range_outcome.status == RangeStatus.SATISFIED

    @property
    def status_code(self) -> int:
        return 206 if self.is_partial else 200

    @property
    def start(self) -> int:
        return self.range_outcome.byte_range.start if self.is_partial else 0

    @property
    def content_length(self) -> int:
        return self.range_outcome.byte_range.length if self.is_partial else self.range_outcome.total

    @property
    def headers(self) -> Dict[str, str]:
        headers = {"Content-Length": str(self.content_length)}
        if self.is_partial:
            headers["Content-Range"] = self.range_outcome.byte_range.content_range
            headers["Accept-Ranges"] = "bytes"
        return headers

    def iter_bytes(self) -> AsyncIterator[bytes]:
        return self.video_repository.iter_file_range(self.path, self.start, self.content_length, self.chunk_size)


class TranscodeStream:
    """Live encoder output, forwarded in arrival order"""

    def __init__(self, process: EncoderProcess, first_chunk: bytes, source_path: str, content_type: str):
        self.process = process
        self.first_chunk = first_chunk
        self.source_path = source_path
        self.content_type = content_type
        self.logger = logging.getLogger(__name__)

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        """Yield encoder output; the encoder is stopped on every exit path"""
        finished = False
        try:
            chunk = self.first_chunk
            while chunk:
                yield chunk
                # Read the next chunk only once the previous one was sent
                chunk = await self.process.read_chunk()

            returncode = await self.process.wait()
            finished = True
            if returncode != 0:
                self.logger.error(
                    f"Transcoder for {self.source_path} exited with code {returncode} mid-stream, "
                    f"response truncated: {self.process.stderr_tail()}"
                )
            else:
                self.logger.info(f"Transcoded stream for {self.source_path} completed")
        finally:
            if not finished:
                self.logger.info(f"Transcoded stream for {self.source_path} closed before the encoder finished")
            await asyncio.shield(self.process.close())

    async def close(self) -> None:
        await self.process.close()


class StreamingService:
    """Application service for video delivery"""

    def __init__(
        self,
        video_repository: VideoRepository,
        delivery_policy: DeliveryPolicy,
        transcoder: Transcoder,
        config: StreamingConfig
    ):
        self.video_repository = video_repository
        self.delivery_policy = delivery_policy
        self.transcoder = transcoder
        self.config = config
        self.logger = logging.getLogger(__name__)

    async def resolve_video(self, path: Optional[str], video_id: Optional[str]) -> Result[VideoRecord]:
        """Resolve the `path` / `id` query parameters to a manifest record"""
        identity = identity_from_query(path, video_id)
        if not identity.ok:
            return identity
        return await self.video_repository.lookup(identity.data)

    def choose_delivery(self, record: VideoRecord) -> DeliveryMode:
        return self.delivery_policy.decide(record)

    async def open_direct(self, record: VideoRecord, range_header: Optional[str]) -> Result[DirectStream]:
        """Prepare a direct byte stream honoring the Range header"""
        size = await self.video_repository.get_file_size(record.path)
        if not size.ok:
            return size

        range_outcome = parse_range_header(range_header, size.data)
        if range_outcome.status == RangeStatus.UNSATISFIABLE:
            self.logger.debug(f"Unsatisfiable range {range_header!r} for {record.path} ({size.data} bytes)")
            return Result.Err(
                ErrorKind.UNSATISFIABLE_RANGE,
                f"Range {range_header!r} not satisfiable",
                content_range=range_outcome.unsatisfied_content_range
            )

        return Result.Ok(DirectStream(
            video_repository=self.video_repository,
            path=record.path,
            range_outcome=range_outcome,
            content_type=self.get_content_type(record.path),
            chunk_size=self.get_optimal_chunk_size(size.data)
        ))

    async def open_transcode(self, record: VideoRecord) -> Result[TranscodeStream]:
        """Start an encoder and wait for its first output chunk"""
        size = await self.video_repository.get_file_size(record.path)
        if not size.ok:
            return size

        spawned = await self.transcoder.spawn(record.path)
        if not spawned.ok:
            return spawned

        process = spawned.data
        try:
            first_chunk = await process.read_chunk()
            if not first_chunk:
                returncode = await process.wait()
                if returncode != 0:
                    self.logger.error(
                        f"Transcoder for {record.path} exited with code {returncode} before producing output: "
                        f"{process.stderr_tail()}"
                    )
                    await process.close()
                    return Result.Err(
                        ErrorKind.UPSTREAM_PROCESS_FAILURE,
                        f"Transcoding failed with exit code {returncode}",
                        path=record.path,
                        returncode=returncode
                    )
        except asyncio.CancelledError:
            await asyncio.shield(process.close())
            raise
        except Exception as e:
            self.logger.error(f"Error reading transcoder output for {record.path}: {e}")
            await process.close()
            return Result.Err(ErrorKind.UPSTREAM_PROCESS_FAILURE, f"Transcoding failed: {e}", path=record.path)

        return Result.Ok(TranscodeStream(process, first_chunk, record.path, self.transcoder.content_type))

    def get_content_type(self, path: str) -> str:
        """Known video containers first, then mimetypes, then octet-stream"""
        content_type = self.config.content_types.get(os.path.splitext(path)[1].lower())
        if content_type:
            return content_type

        guessed, _ = mimetypes.guess_type(path)
        return guessed or "application/octet-stream"

    def get_optimal_chunk_size(self, file_size: int) -> int:
        """Get chunk size for streaming based on file size"""
        if file_size < 1024 * 1024:  # < 1MB
            return 64 * 1024
        elif file_size < 10 * 1024 * 1024:  # < 10MB
            return 256 * 1024
        elif file_size < 100 * 1024 * 1024:  # < 100MB
            return 512 * 1024
        else:
            return 1024 * 1024

