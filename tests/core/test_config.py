"""Configuration loading"""

import json

from video_browser.core.config import Config


def test_missing_file_writes_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    config = Config(str(tmp_path / "config.json"))

    saved = json.loads((tmp_path / "config.json").read_text())
    assert saved["streaming"]["native_codec"] == "h264"
    assert saved["system"]["api_port"] == 3000
    assert config.library.scan_root
    assert (tmp_path / "public" / "thumbnails").is_dir()


def test_partial_content_types_are_merged(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "library": {"public_dir": str(tmp_path / "public"), "manifest_path": str(tmp_path / "public" / "m.json"), "thumbnail_dir": str(tmp_path / "public" / "t")},
        "streaming": {"native_codec": "vp9", "content_types": {".mkv": "video/webm"}},
    }))

    config = Config(str(path))

    assert config.streaming.native_codec == "vp9"
    assert config.streaming.content_types[".mkv"] == "video/webm"
    assert config.streaming.content_types[".mp4"] == "video/mp4"
    assert config.system.api_port == 3000
