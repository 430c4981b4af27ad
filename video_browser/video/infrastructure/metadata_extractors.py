"""
Video Metadata Extractors.

Thumbnail extraction with OpenCV and codec detection with ffprobe.
"""

import asyncio
import json
import logging
import shutil
from typing import Optional, Tuple
from pathlib import Path

import cv2

from ..domain.interfaces import CodecProbe, ThumbnailExtractor


class OpenCVThumbnailExtractor(ThumbnailExtractor):
    """OpenCV-based thumbnail extractor"""

    def __init__(self, jpeg_quality: int = 85):
        self.jpeg_quality = jpeg_quality
        self.logger = logging.getLogger(__name__)

    async def extract_thumbnail(
        self,
        file_path: Path,
        timestamp_seconds: float = 1.0,
        size: Tuple[int, int] = (320, 240)
    ) -> Optional[bytes]:
        """Extract thumbnail image from video"""
        try:
            # OpenCV blocks, keep it off the event loop
            return await asyncio.get_event_loop().run_in_executor(
                None, self._extract_thumbnail_sync, file_path, timestamp_seconds, size
            )
        except Exception as e:
            self.logger.error(f"Error extracting thumbnail from {file_path}: {e}")
            return None

    def _extract_thumbnail_sync(
        self,
        file_path: Path,
        timestamp_seconds: float,
        size: Tuple[int, int]
    ) -> Optional[bytes]:
        """Synchronous thumbnail extraction"""
        cap = None
        try:
            cap = cv2.VideoCapture(str(file_path))

            if not cap.isOpened():
                self.logger.warning(f"Could not open video file: {file_path}")
                return None

            fps = cap.get(cv2.CAP_PROP_FPS)
            if fps <= 0:
                fps = 30  # Default fallback

            cap.set(cv2.CAP_PROP_POS_FRAMES, int(timestamp_seconds * fps))

            ret, frame = cap.read()
            if not ret or frame is None:
                # Clip shorter than the timestamp, fall back to first frame
                cap.set(cv2.CAP_PROP_POS_FRAMES, 0)
                ret, frame = cap.read()
                if not ret or frame is None:
                    return None

            thumbnail = cv2.resize(frame, tuple(size))

            success, buffer = cv2.imencode('.jpg', thumbnail, [cv2.IMWRITE_JPEG_QUALITY, self.jpeg_quality])
            if success:
                return buffer.tobytes()

            return None

        except Exception as e:
            self.logger.error(f"Error in sync thumbnail extraction: {e}")
            return None

        finally:
            if cap is not None:
                cap.release()


class FFprobeCodecProbe(CodecProbe):
    """Detects the video codec with ffprobe"""

    def __init__(self, ffprobe_path: str = "ffprobe", timeout_seconds: float = 15.0):
        self.ffprobe_path = ffprobe_path
        self.timeout_seconds = timeout_seconds
        self.logger = logging.getLogger(__name__)

        self._ffprobe_available = shutil.which(ffprobe_path) is not None
        if not self._ffprobe_available:
            self.logger.warning("ffprobe not found - codec detection will be disabled")

    def is_available(self) -> bool:
        return self._ffprobe_available

    async def probe_codec(self, file_path: Path) -> Optional[str]:
        """Get the codec name of the first video stream"""
        if not self._ffprobe_available:
            return None

        cmd = [
            self.ffprobe_path,
            "-v", "error",
            "-select_streams", "v:0",
            "-show_entries", "stream=codec_name",
            "-of", "json",
            str(file_path),
        ]

        process = None
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout_seconds)

            if process.returncode != 0:
                error_msg = stderr.decode(errors="replace").strip() if stderr else "Unknown ffprobe error"
                self.logger.warning(f"ffprobe failed for {file_path}: {error_msg}")
                return None

            streams = json.loads(stdout or b"{}").get("streams") or []
            if not streams:
                return None
            return streams[0].get("codec_name")

        except asyncio.TimeoutError:
            self.logger.warning(f"ffprobe timed out for {file_path}")
            if process is not None and process.returncode is None:
                process.kill()
                await process.wait()
            return None

        except Exception as e:
            self.logger.error(f"Error probing codec of {file_path}: {e}")
            return None
