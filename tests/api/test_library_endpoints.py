"""Listing, toggling, syncing and the health check"""

import json

import pytest

from conftest import FakeCodecProbe, FakeThumbnailExtractor


@pytest.fixture
def entries(media_root):
    return [
        {"path": str(media_root / "a.mp4"), "disabled": False, "thumbnail": "/thumbnails/a.mp4.jpg", "codec": "h264"},
        {"path": str(media_root / "b.mov"), "disabled": True, "thumbnail": "/thumbnails/b.mov.jpg", "codec": "prores"},
    ]


def read_manifest(tmp_path):
    return json.loads((tmp_path / "public" / "video-manifest.json").read_text())


@pytest.mark.asyncio
async def test_list_videos(make_client, entries, media_root):
    async with make_client(entries) as client:
        response = await client.get("/videos")

    assert response.status_code == 200
    body = response.json()
    assert body["total_count"] == 2
    assert body["videos"][0] == {
        "id": 0,
        "path": str(media_root / "a.mp4"),
        "disabled": False,
        "thumbnail": "/thumbnails/a.mp4.jpg",
        "codec": "h264",
        "delivery_mode": "direct",
    }
    assert body["videos"][1]["delivery_mode"] == "transcode"
    assert body["videos"][1]["disabled"] is True


@pytest.mark.asyncio
async def test_toggle_video_status(make_client, entries, media_root, tmp_path):
    async with make_client(entries) as client:
        response = await client.post("/toggle-video-status", json={"videoPath": str(media_root / "a.mp4"), "disabled": True})

    assert response.status_code == 200
    assert response.json()["success"] is True
    manifest = read_manifest(tmp_path)
    assert manifest[0]["disabled"] is True
    assert manifest[1]["disabled"] is True


@pytest.mark.asyncio
async def test_toggle_unknown_video_is_not_found(make_client, entries, tmp_path):
    async with make_client(entries) as client:
        response = await client.post("/toggle-video-status", json={"videoPath": "/nowhere/x.mp4", "disabled": True})

    assert response.status_code == 404
    assert read_manifest(tmp_path) == entries


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"videoPath": "/videos/a.mp4"}, {"disabled": False}])
async def test_toggle_requires_both_fields(make_client, entries, body):
    async with make_client(entries) as client:
        response = await client.post("/toggle-video-status", json=body)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_sync_rebuilds_manifest(make_client, entries, media_root, tmp_path):
    nested = media_root / "trips"
    nested.mkdir()
    (nested / "c.webm").write_bytes(b"webm")
    (nested / "notes.txt").write_text("not a video")
    excluded = media_root / "node_modules"
    excluded.mkdir()
    (excluded / "d.mp4").write_bytes(b"skip me")

    extractor = FakeThumbnailExtractor(fail_for={"c.webm"})
    probe = FakeCodecProbe({"c.webm": "vp9"})

    async with make_client(entries, thumbnail_extractor=extractor, codec_probe=probe) as client:
        response = await client.post("/sync")
        listing = await client.get("/videos")

    assert response.status_code == 200
    report = response.json()
    assert report["success"] is True
    assert report["videos_found"] == 3
    assert report["thumbnails_generated"] == 2
    assert report["thumbnails_failed"] == 1
    assert report["codecs_probed"] == 1

    manifest = {entry["path"]: entry for entry in read_manifest(tmp_path)}
    assert set(manifest) == {str(media_root / "a.mp4"), str(media_root / "b.mov"), str(nested / "c.webm")}
    # Flags and codecs of known videos survive a rescan
    assert manifest[str(media_root / "b.mov")]["disabled"] is True
    assert manifest[str(media_root / "b.mov")]["codec"] == "prores"
    assert manifest[str(nested / "c.webm")] == {
        "path": str(nested / "c.webm"),
        "disabled": False,
        "thumbnail": "/thumbnails/c.webm.jpg",
        "codec": "vp9",
    }
    assert (tmp_path / "public" / "thumbnails" / "a.mp4.jpg").exists()
    assert not (tmp_path / "public" / "thumbnails" / "c.webm.jpg").exists()
    # Known codecs are not probed again
    assert [path.name for path in probe.calls] == ["c.webm"]

    assert listing.json()["total_count"] == 3


@pytest.mark.asyncio
async def test_sync_skips_existing_thumbnails(make_client, entries, tmp_path):
    thumbnails = tmp_path / "public" / "thumbnails"
    thumbnails.mkdir(parents=True)
    (thumbnails / "a.mp4.jpg").write_bytes(b"old")
    (thumbnails / "b.mov.jpg").write_bytes(b"old")

    extractor = FakeThumbnailExtractor()
    async with make_client(entries, thumbnail_extractor=extractor) as client:
        response = await client.post("/sync")

    assert response.json()["thumbnails_generated"] == 0
    assert extractor.calls == []
    assert (thumbnails / "a.mp4.jpg").read_bytes() == b"old"


@pytest.mark.asyncio
async def test_health_and_static_manifest(make_client, entries):
    async with make_client(entries) as client:
        health = await client.get("/health")
        manifest = await client.get("/video-manifest.json")

    assert health.status_code == 200
    assert health.json()["status"] == "healthy"
    assert health.json()["video_module"]["native_codec"] == "h264"
    assert health.json()["server"]["public_dir"].endswith("public")
    assert manifest.status_code == 200
    assert manifest.json() == entries
