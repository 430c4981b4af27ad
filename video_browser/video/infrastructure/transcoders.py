"""
Video Transcoders.

On-the-fly transcoding with FFmpeg. The encoder writes a fragmented MP4 to its
stdout, which is read chunk by chunk and forwarded to the HTTP response.
"""

import asyncio
import collections
import logging
import shutil
from typing import List, Optional

from ..domain.interfaces import EncoderProcess, Transcoder
from ..domain.results import ErrorKind, Result
from ...core.config import StreamingConfig

QUALITY_TO_CRF = {"high": "18", "medium": "23", "low": "28"}


class FFmpegProcess(EncoderProcess):
    """Running FFmpeg encoder with a drained stderr pipe"""

    def __init__(
        self,
        process: asyncio.subprocess.Process,
        source_path: str,
        chunk_size: int = 256 * 1024,
        terminate_timeout: float = 5.0,
        stderr_tail_lines: int = 20
    ):
        self._process = process
        self.source_path = source_path
        self.chunk_size = chunk_size
        self.terminate_timeout = terminate_timeout
        self.logger = logging.getLogger(__name__)

        self._stderr_lines = collections.deque(maxlen=stderr_tail_lines)
        self._stderr_task = asyncio.ensure_future(self._drain_stderr())
        self._closed = False

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def returncode(self) -> Optional[int]:
        return self._process.returncode

    async def read_chunk(self) -> bytes:
        return await self._process.stdout.read(self.chunk_size)

    async def wait(self) -> int:
        returncode = await self._process.wait()
        # Let the stderr reader pick up the last lines before they are reported
        await asyncio.wait({self._stderr_task}, timeout=1.0)
        return returncode

    def stderr_tail(self) -> str:
        return "\n".join(self._stderr_lines)

    async def _drain_stderr(self) -> None:
        """Consume stderr so the encoder never blocks on a full pipe"""
        while True:
            line = await self._process.stderr.readline()
            if not line:
                break
            text = line.decode(errors="replace").rstrip()
            if text:
                self._stderr_lines.append(text)
                self.logger.debug(f"ffmpeg[{self.pid}] {text}")

    async def close(self) -> None:
        """Terminate the encoder if still running and stop the stderr reader"""
        if self._closed:
            return
        self._closed = True

        try:
            if self._process.returncode is None:
                self.logger.info(f"Terminating encoder pid {self.pid} for {self.source_path}")
                # Signal first so a cancelled caller still stops the encoder
                self._signal("terminate")
                try:
                    await asyncio.wait_for(self._process.wait(), timeout=self.terminate_timeout)
                except asyncio.TimeoutError:
                    self.logger.warning(f"Encoder pid {self.pid} ignored SIGTERM, killing it")
                    self._signal("kill")
                    await self._process.wait()
        finally:
            if not self._stderr_task.done():
                self._stderr_task.cancel()

    def _signal(self, method: str) -> None:
        try:
            getattr(self._process, method)()
        except ProcessLookupError:
            pass


class FFmpegTranscoder(Transcoder):
    """FFmpeg-based streaming transcoder"""

    def __init__(self, config: StreamingConfig):
        self.config = config
        self.logger = logging.getLogger(__name__)

        self._ffmpeg_available = shutil.which(config.ffmpeg_path) is not None
        if not self._ffmpeg_available:
            self.logger.warning("FFmpeg not found - transcoding will be disabled")

    @property
    def content_type(self) -> str:
        return self.config.output_content_type

    def is_available(self) -> bool:
        return self._ffmpeg_available

    async def spawn(self, source_path: str) -> Result[EncoderProcess]:
        """Start an encoder for `source_path` writing to its stdout"""
        if not self._ffmpeg_available:
            self.logger.error(f"FFmpeg not available to transcode {source_path}")
            return Result.Err(ErrorKind.UPSTREAM_PROCESS_FAILURE, "Transcoder not available", path=source_path)

        cmd = self.build_command(source_path)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
        except (OSError, ValueError) as e:
            self.logger.error(f"Could not start encoder for {source_path}: {e}")
            return Result.Err(ErrorKind.UPSTREAM_PROCESS_FAILURE, f"Could not start transcoder: {e}", path=source_path)

        self.logger.info(f"Started encoder pid {process.pid} for {source_path}")

        return Result.Ok(FFmpegProcess(
            process,
            source_path,
            chunk_size=self.config.pipe_chunk_size,
            terminate_timeout=self.config.terminate_timeout_seconds,
            stderr_tail_lines=self.config.stderr_tail_lines
        ))

    def build_command(self, source_path: str) -> List[str]:
        """Build FFmpeg command producing a fragmented MP4 on stdout"""
        crf = QUALITY_TO_CRF.get(self.config.transcode_quality, QUALITY_TO_CRF["medium"])

        return [
            self.config.ffmpeg_path,
            "-nostdin",
            "-hide_banner",
            "-loglevel", "error",
            "-i", source_path,
            "-map", "0:v:0",
            "-map", "0:a:0?",  # Audio is optional
            "-c:v", self.config.video_encoder,
            "-preset", self.config.transcode_preset,
            "-crf", crf,
            "-pix_fmt", "yuv420p",
            "-c:a", self.config.audio_encoder,
            # Fragmented MP4 can be written to a pipe and played while it grows
            "-movflags", "frag_keyframe+empty_moov+default_base_moof",
            "-f", "mp4",
            "pipe:1",
        ]
