"""
Shared fixtures: a throwaway configuration, a small media library, fake
encoder scripts and an HTTP client bound to the ASGI app.
"""

import json
import stat
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

import httpx
import pytest

from video_browser.api.server import APIServer
from video_browser.core.config import Config
from video_browser.storage.manifest import ManifestStore
from video_browser.video.domain.interfaces import CodecProbe, ThumbnailExtractor
from video_browser.video.integration import VideoModule

VIDEO_BYTES = bytes(i % 256 for i in range(1000))


class FakeThumbnailExtractor(ThumbnailExtractor):
    """Returns a fixed JPEG payload, or nothing for the names in `fail_for`"""

    def __init__(self, fail_for: Iterable[str] = ()):
        self.fail_for = set(fail_for)
        self.calls = []

    async def extract_thumbnail(self, file_path: Path, timestamp_seconds: float = 1.0, size: Tuple[int, int] = (320, 240)) -> Optional[bytes]:
        self.calls.append(file_path)
        if file_path.name in self.fail_for:
            return None
        return b"\xff\xd8\xff\xe0fake-jpeg"


class FakeCodecProbe(CodecProbe):
    """Answers codec lookups by file name"""

    def __init__(self, codecs: Optional[Dict[str, str]] = None):
        self.codecs = codecs or {}
        self.calls = []

    async def probe_codec(self, file_path: Path) -> Optional[str]:
        self.calls.append(file_path)
        return self.codecs.get(file_path.name)


@pytest.fixture
def media_root(tmp_path):
    root = tmp_path / "media"
    root.mkdir()
    (root / "a.mp4").write_bytes(VIDEO_BYTES)
    (root / "b.mov").write_bytes(b"prores source")
    return root


@pytest.fixture
def write_script(tmp_path):
    """Write an executable /bin/sh script standing in for ffmpeg"""

    def _write(name: str, body: str) -> str:
        script = tmp_path / "bin" / name
        script.parent.mkdir(exist_ok=True)
        script.write_text("#!/bin/sh\n" + body + "\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return _write


@pytest.fixture
def make_config(tmp_path, media_root):
    def _make(**streaming) -> Config:
        public_dir = tmp_path / "public"
        data = {
            "library": {
                "public_dir": str(public_dir),
                "manifest_path": str(public_dir / "video-manifest.json"),
                "thumbnail_dir": str(public_dir / "thumbnails"),
                "scan_root": str(media_root),
                "excluded_dirs": ["node_modules", ".git"],
            },
            "streaming": {
                "ffmpeg_path": str(tmp_path / "bin" / "no-such-ffmpeg"),
                "ffprobe_path": str(tmp_path / "bin" / "no-such-ffprobe"),
                "terminate_timeout_seconds": 2.0,
                **streaming,
            },
            "system": {"log_file": None},
        }
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps(data))
        return Config(str(config_path))

    return _make


@pytest.fixture
def make_client(make_config):
    """Build the full application around a manifest and return an httpx client"""

    def _make(entries, thumbnail_extractor=None, codec_probe=None, **streaming) -> httpx.AsyncClient:
        config = make_config(**streaming)
        ManifestStore(config.library.manifest_path).save(entries)

        module = VideoModule(
            config,
            thumbnail_extractor=thumbnail_extractor or FakeThumbnailExtractor(),
            codec_probe=codec_probe or FakeCodecProbe()
        )
        app = APIServer(config, module).app
        return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver")

    return _make
