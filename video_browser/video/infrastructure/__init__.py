"""
Video Infrastructure Layer.

Contains implementations of domain interfaces using external dependencies
like the file system, FFmpeg and OpenCV.
"""

from .repositories import ManifestVideoRepository
from .transcoders import FFmpegTranscoder, FFmpegProcess
from .metadata_extractors import OpenCVThumbnailExtractor, FFprobeCodecProbe

__all__ = [
    "ManifestVideoRepository",
    "FFmpegTranscoder",
    "FFmpegProcess",
    "OpenCVThumbnailExtractor",
    "FFprobeCodecProbe",
]
