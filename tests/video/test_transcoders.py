"""FFmpeg process handling, exercised against small shell scripts"""

import pytest

from video_browser.core.config import StreamingConfig
from video_browser.video.domain.results import ErrorKind
from video_browser.video.infrastructure.transcoders import FFmpegTranscoder


async def read_all(process) -> bytes:
    data = b""
    while True:
        chunk = await process.read_chunk()
        if not chunk:
            return data
        data += chunk


def test_command_writes_fragmented_mp4_to_stdout():
    transcoder = FFmpegTranscoder(StreamingConfig(ffmpeg_path="ffmpeg", transcode_quality="high"))
    cmd = transcoder.build_command("/videos/b.mov")

    assert cmd[0] == "ffmpeg"
    assert cmd[cmd.index("-i") + 1] == "/videos/b.mov"
    assert cmd[cmd.index("-c:v") + 1] == "libx264"
    assert cmd[cmd.index("-crf") + 1] == "18"
    assert cmd[cmd.index("-movflags") + 1] == "frag_keyframe+empty_moov+default_base_moof"
    assert cmd[-3:] == ["-f", "mp4", "pipe:1"]
    assert "-ss" not in cmd


def test_unknown_quality_falls_back_to_medium():
    transcoder = FFmpegTranscoder(StreamingConfig(transcode_quality="ultra"))
    cmd = transcoder.build_command("/videos/b.mov")
    assert cmd[cmd.index("-crf") + 1] == "23"


@pytest.mark.asyncio
async def test_missing_binary_is_an_upstream_failure(tmp_path):
    transcoder = FFmpegTranscoder(StreamingConfig(ffmpeg_path=str(tmp_path / "nope")))
    assert not transcoder.is_available()

    result = await transcoder.spawn("/videos/b.mov")
    assert not result.ok
    assert result.kind == ErrorKind.UPSTREAM_PROCESS_FAILURE


@pytest.mark.asyncio
async def test_output_is_forwarded_in_order(write_script):
    script = write_script("ffmpeg-ok", "printf 'fragment-1'; printf 'fragment-2'")
    transcoder = FFmpegTranscoder(StreamingConfig(ffmpeg_path=script))

    result = await transcoder.spawn("/videos/b.mov")
    assert result.ok

    async with result.data as process:
        assert await read_all(process) == b"fragment-1fragment-2"
        assert await process.wait() == 0


@pytest.mark.asyncio
async def test_failed_encoder_keeps_stderr_tail(write_script):
    script = write_script("ffmpeg-fail", "echo 'first line' >&2; echo 'Invalid data found when processing input' >&2; exit 1")
    transcoder = FFmpegTranscoder(StreamingConfig(ffmpeg_path=script, stderr_tail_lines=1))

    process = (await transcoder.spawn("/videos/b.mov")).unwrap()
    try:
        assert await read_all(process) == b""
        assert await process.wait() == 1
        assert process.stderr_tail() == "Invalid data found when processing input"
    finally:
        await process.close()


@pytest.mark.asyncio
async def test_close_terminates_a_running_encoder(write_script):
    script = write_script("ffmpeg-slow", "printf 'head'; exec sleep 30")
    transcoder = FFmpegTranscoder(StreamingConfig(ffmpeg_path=script))

    process = (await transcoder.spawn("/videos/b.mov")).unwrap()
    assert await process.read_chunk() == b"head"
    assert process.returncode is None

    await process.close()
    assert process.returncode == -15

    # Closing twice is harmless
    await process.close()


@pytest.mark.asyncio
async def test_close_kills_an_encoder_ignoring_sigterm(write_script):
    script = write_script("ffmpeg-stubborn", "trap '' TERM; printf 'head'; while true; do sleep 1; done")
    transcoder = FFmpegTranscoder(StreamingConfig(ffmpeg_path=script, terminate_timeout_seconds=0.5))

    process = (await transcoder.spawn("/videos/b.mov")).unwrap()
    assert await process.read_chunk() == b"head"

    await process.close()
    assert process.returncode == -9


@pytest.mark.asyncio
async def test_each_spawn_is_an_independent_process(write_script):
    script = write_script("ffmpeg-pid", "echo $$; exec sleep 30")
    transcoder = FFmpegTranscoder(StreamingConfig(ffmpeg_path=script))

    first = (await transcoder.spawn("/videos/b.mov")).unwrap()
    second = (await transcoder.spawn("/videos/b.mov")).unwrap()
    try:
        assert first.pid != second.pid
        assert (await first.read_chunk()).strip() == str(first.pid).encode()
        assert (await second.read_chunk()).strip() == str(second.pid).encode()
    finally:
        await first.close()
        await second.close()
