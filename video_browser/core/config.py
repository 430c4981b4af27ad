"""
Configuration management for the Video Browser.

This module handles all configuration settings including the media library location,
manifest and thumbnail paths, transcoding parameters, and server settings.
"""

import os
import json
import logging
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, asdict, field
from pathlib import Path


def _default_content_types() -> Dict[str, str]:
    return {
        ".mp4": "video/mp4",
        ".m4v": "video/mp4",
        ".webm": "video/webm",
        ".ogg": "video/ogg",
        ".ogv": "video/ogg",
        ".mov": "video/quicktime",
        ".mkv": "video/x-matroska",
        ".avi": "video/x-msvideo",
    }


@dataclass
class LibraryConfig:
    """Media library, manifest and thumbnail configuration"""

    public_dir: str = "public"
    manifest_path: str = "public/video-manifest.json"
    thumbnail_dir: str = "public/thumbnails"
    thumbnail_url_prefix: str = "/thumbnails"
    scan_root: Optional[str] = None  # None means the user's home directory
    video_extensions: List[str] = field(default_factory=lambda: [".mp4", ".webm", ".ogg", ".mov"])
    excluded_dirs: List[str] = field(default_factory=lambda: ["node_modules", ".git", "Library", "Application Support"])
    thumbnail_timestamp_seconds: float = 1.0
    thumbnail_size: List[int] = field(default_factory=lambda: [320, 240])
    probe_codecs: bool = True

    def __post_init__(self):
        if self.scan_root is None:
            self.scan_root = os.path.expanduser("~")


@dataclass
class StreamingConfig:
    """Direct streaming and transcoding configuration"""

    native_codec: str = "h264"  # Codec the browser player decodes without conversion
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    video_encoder: str = "libx264"
    audio_encoder: str = "aac"
    transcode_preset: str = "veryfast"
    transcode_quality: str = "medium"  # high, medium or low
    output_content_type: str = "video/mp4"
    pipe_chunk_size: int = 256 * 1024
    terminate_timeout_seconds: float = 5.0  # Grace period between SIGTERM and SIGKILL
    stderr_tail_lines: int = 20
    content_types: Dict[str, str] = field(default_factory=_default_content_types)


@dataclass
class SystemConfig:
    """System-wide configuration"""

    log_level: str = "INFO"
    log_file: Optional[str] = "video_browser.log"
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    enable_api: bool = True
    enable_cors: bool = True


class Config:
    """Main configuration manager"""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or "config.json"
        self.logger = logging.getLogger(__name__)

        # Default configurations
        self.library = LibraryConfig()
        self.streaming = StreamingConfig()
        self.system = SystemConfig()

        # Load configuration
        self.load_config()

        # Ensure manifest and thumbnail directories exist
        self._ensure_library_directories()

    def load_config(self) -> None:
        """Load configuration from file"""
        config_path = Path(self.config_file)

        if config_path.exists():
            try:
                with open(config_path, "r") as f:
                    config_data = json.load(f)

                if "library" in config_data:
                    self.library = LibraryConfig(**config_data["library"])

                if "streaming" in config_data:
                    streaming_data = config_data["streaming"]
                    # Merge content types so a partial map only overrides what it names
                    content_types = _default_content_types()
                    content_types.update(streaming_data.pop("content_types", {}) or {})
                    self.streaming = StreamingConfig(content_types=content_types, **streaming_data)

                if "system" in config_data:
                    self.system = SystemConfig(**config_data["system"])

                self.logger.info(f"Configuration loaded from {config_path}")

            except Exception as e:
                self.logger.error(f"Error loading config from {config_path}: {e}")
        else:
            self.logger.info(f"Config file {config_path} not found, using defaults")
            self.save_config()  # Save default config

    def save_config(self) -> None:
        """Save current configuration to file"""
        try:
            with open(self.config_file, "w") as f:
                json.dump(self.to_dict(), f, indent=2)
            self.logger.info(f"Configuration saved to {self.config_file}")
        except Exception as e:
            self.logger.error(f"Error saving config to {self.config_file}: {e}")

    def _ensure_library_directories(self) -> None:
        """Ensure the public, manifest and thumbnail directories exist"""
        try:
            Path(self.library.public_dir).mkdir(parents=True, exist_ok=True)
            Path(self.library.manifest_path).parent.mkdir(parents=True, exist_ok=True)
            Path(self.library.thumbnail_dir).mkdir(parents=True, exist_ok=True)

            self.logger.info("Library directories verified/created")
        except Exception as e:
            self.logger.error(f"Error creating library directories: {e}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {"library": asdict(self.library), "streaming": asdict(self.streaming), "system": asdict(self.system)}
