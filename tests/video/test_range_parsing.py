"""Range header parsing and query identity resolution"""

import pytest

from video_browser.video.domain.models import (
    ById,
    ByPath,
    ByteRange,
    RangeStatus,
    identity_from_query,
    parse_range_header,
)
from video_browser.video.domain.results import ErrorKind


def test_missing_header_means_full_content():
    outcome = parse_range_header(None, 1000)
    assert outcome.status == RangeStatus.NO_RANGE
    assert outcome.byte_range is None


def test_closed_range():
    outcome = parse_range_header("bytes=100-199", 1000)
    assert outcome.status == RangeStatus.SATISFIED
    assert outcome.byte_range.start == 100
    assert outcome.byte_range.end == 199
    assert outcome.byte_range.length == 100
    assert outcome.byte_range.content_range == "bytes 100-199/1000"


def test_open_ended_range_runs_to_last_byte():
    outcome = parse_range_header("bytes=500-", 1000)
    assert outcome.status == RangeStatus.SATISFIED
    assert outcome.byte_range.end == 999
    assert outcome.byte_range.length == 500


def test_end_past_file_is_clamped():
    outcome = parse_range_header("bytes=900-5000", 1000)
    assert outcome.byte_range.end == 999
    assert outcome.byte_range.content_range == "bytes 900-999/1000"


def test_single_byte_ranges_at_both_edges():
    first = parse_range_header("bytes=0-0", 1000)
    last = parse_range_header("bytes=999-999", 1000)
    assert first.byte_range.length == 1
    assert last.byte_range.content_range == "bytes 999-999/1000"


@pytest.mark.parametrize("header", [
    "bytes=1000-",      # start at end of file
    "bytes=2000-3000",  # start past end of file
    "bytes=200-100",    # inverted
    "bytes=-500",       # suffix range
    "bytes=0-1,5-9",    # multiple ranges
    "items=0-10",       # unknown unit
    "bytes=abc-def",
    "",
])
def test_unsatisfiable_ranges(header):
    outcome = parse_range_header(header, 1000)
    assert outcome.status == RangeStatus.UNSATISFIABLE
    assert outcome.unsatisfied_content_range == "bytes */1000"


def test_any_range_on_empty_file_is_unsatisfiable():
    assert parse_range_header("bytes=0-", 0).status == RangeStatus.UNSATISFIABLE
    assert parse_range_header(None, 0).status == RangeStatus.NO_RANGE


def test_satisfied_ranges_stay_inside_the_file():
    total = 37
    for start in range(0, total + 3):
        for end in (start - 1, start, start + 5, total - 1, total + 10):
            if end < 0:
                continue
            outcome = parse_range_header(f"bytes={start}-{end}", total)
            if outcome.status == RangeStatus.SATISFIED:
                byte_range = outcome.byte_range
                assert 0 <= byte_range.start <= byte_range.end <= total - 1
                assert byte_range.length == byte_range.end - byte_range.start + 1
            else:
                assert start >= total or start > end


def test_byte_range_rejects_out_of_bounds_values():
    with pytest.raises(ValueError):
        ByteRange(start=10, end=5, total=100)
    with pytest.raises(ValueError):
        ByteRange(start=0, end=100, total=100)


def test_identity_by_id_and_by_path():
    assert identity_from_query(None, "3").data == ById(3)
    assert identity_from_query("/videos/a.mp4", None).data == ByPath("/videos/a.mp4")


@pytest.mark.parametrize("path,video_id", [
    (None, None),
    ("", None),
    (None, "abc"),
    (None, "-1"),
    (None, "1.5"),
    ("/videos/a.mp4", "0"),
])
def test_invalid_identity(path, video_id):
    result = identity_from_query(path, video_id)
    assert not result.ok
    assert result.kind == ErrorKind.INVALID_REQUEST
