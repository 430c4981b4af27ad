"""Encoder cleanup when the client goes away"""

import asyncio

import pytest

from video_browser.video.presentation.controllers import ScopedStreamingResponse


def http_scope():
    return {
        "type": "http",
        "asgi": {"version": "3.0", "spec_version": "2.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/video",
        "raw_path": b"/video",
        "query_string": b"id=1",
        "headers": [],
    }


@pytest.mark.asyncio
async def test_on_close_runs_after_client_disconnect():
    closed = asyncio.Event()
    sent = []

    async def endless():
        while True:
            yield b"chunk"
            await asyncio.sleep(0.01)

    async def on_close():
        closed.set()

    async def receive():
        return {"type": "http.disconnect"}

    async def send(message):
        sent.append(message["type"])

    response = ScopedStreamingResponse(endless(), on_close=on_close, media_type="video/mp4")
    await asyncio.wait_for(response(http_scope(), receive, send), timeout=5)

    assert closed.is_set()


@pytest.mark.asyncio
async def test_on_close_runs_after_complete_response():
    calls = []

    async def body():
        yield b"a"
        yield b"b"

    async def on_close():
        calls.append("closed")

    async def receive():
        await asyncio.sleep(10)

    sent = []

    async def send(message):
        sent.append(message)

    response = ScopedStreamingResponse(body(), on_close=on_close, media_type="video/mp4")
    await response(http_scope(), receive, send)

    assert calls == ["closed"]
    assert b"".join(m.get("body", b"") for m in sent if m["type"] == "http.response.body") == b"ab"
