from __future__ import annotations

import pytest

from marquee.core.subtitle import (
    EXTRA_ARROW,
    FORMAT_SRT,
    FORMAT_WEBVTT,
    INVERTED_WINDOW,
    ORPHAN_LINE,
    SubtitleParseError,
    detect_subtitle_format,
    parse_cues,
    parse_cues_with_report,
)
from marquee.core.timestamp import TIMESTAMP_FALLBACK
from marquee.schemas.subtitle import SubtitleCue

WEBVTT_SAMPLE = (
    "WEBVTT\n"
    "\n"
    "00:00:01.000 --> 00:00:02.000\n"
    "Hello\n"
    "\n"
    "00:00:03.000 --> 00:00:04.500\n"
    "World\n"
)

SRT_SAMPLE = (
    "1\r\n"
    "00:00:01,000 --> 00:00:02,000\r\n"
    "Hello\r\n"
    "\r\n"
    "2\r\n"
    "00:00:03,000 --> 00:00:04,500\r\n"
    "World\r\n"
)


def test_parse_webvtt_two_cues() -> None:
    assert parse_cues(WEBVTT_SAMPLE) == (
        SubtitleCue(start=1.0, end=2.0, text="Hello"),
        SubtitleCue(start=3.0, end=4.5, text="World"),
    )


def test_parse_srt_matches_webvtt_counterpart() -> None:
    assert parse_cues(SRT_SAMPLE) == parse_cues(WEBVTT_SAMPLE)


def test_multiline_cue_text_is_joined_with_spaces() -> None:
    cues = parse_cues(
        "WEBVTT\n\n00:00:01.000 --> 00:00:02.000\nLine one\n  Line two  \n"
    )
    assert cues[0].text == "Line one Line two"


def test_parse_is_idempotent() -> None:
    assert parse_cues(SRT_SAMPLE) == parse_cues(SRT_SAMPLE)


@pytest.mark.parametrize("raw", ["", "WEBVTT", "WEBVTT\n\n\n", "   \r\n"])
def test_empty_or_header_only_input_yields_no_cues(raw: str) -> None:
    assert parse_cues(raw) == ()


def test_header_detection_uses_first_non_empty_line() -> None:
    assert detect_subtitle_format(["WEBVTT", "00:01.000 --> 00:02.000"]) == FORMAT_WEBVTT
    assert detect_subtitle_format(["WEBVTT - Kind: captions"]) == FORMAT_SRT
    assert detect_subtitle_format([]) == FORMAT_SRT


def test_byte_order_mark_before_header_is_trimmed() -> None:
    report = parse_cues_with_report("\ufeffWEBVTT\n\n00:01.000 --> 00:02.000\nHi\n")
    assert report.format == FORMAT_WEBVTT
    assert report.cues == (SubtitleCue(start=1.0, end=2.0, text="Hi"),)


def test_srt_digit_lines_are_dropped_even_inside_cue_text() -> None:
    cues = parse_cues("1\n00:00:01,000 --> 00:00:02,000\nRoom\n101\nplease\n")
    assert cues[0].text == "Room please"


def test_webvtt_keeps_digit_only_text_lines() -> None:
    cues = parse_cues("WEBVTT\n\n00:01.000 --> 00:02.000\n42\n")
    assert cues[0].text == "42"


def test_lines_before_first_cue_are_dropped_and_reported() -> None:
    report = parse_cues_with_report(
        "WEBVTT\nKind: captions\n\n00:01.000 --> 00:02.000\nHi\n"
    )
    assert [cue.text for cue in report.cues] == ["Hi"]
    assert [(w.kind, w.line_number) for w in report.warnings] == [(ORPHAN_LINE, 2)]


def test_cue_settings_corrupt_end_time_to_zero() -> None:
    report = parse_cues_with_report(
        "WEBVTT\n\n00:00:01.000 --> 00:00:02.000 align:start position:10%\nHi\n"
    )
    assert report.cues == (SubtitleCue(start=1.0, end=0.0, text="Hi"),)
    kinds = [warning.kind for warning in report.warnings]
    assert kinds == [TIMESTAMP_FALLBACK, INVERTED_WINDOW]


def test_extra_arrow_uses_first_two_fields() -> None:
    report = parse_cues_with_report("00:01,000 --> 00:02,000 --> 00:03,000\nHi\n")
    assert report.cues == (SubtitleCue(start=1.0, end=2.0, text="Hi"),)
    assert [warning.kind for warning in report.warnings] == [EXTRA_ARROW]


def test_cue_without_text_has_empty_text() -> None:
    cues = parse_cues("00:01,000 --> 00:02,000\n00:03,000 --> 00:04,000\nSecond\n")
    assert cues[0].text == ""
    assert cues[1].text == "Second"


def test_cues_keep_file_order_when_unsorted() -> None:
    cues = parse_cues("00:05,000 --> 00:06,000\nLater\n00:01,000 --> 00:02,000\nEarlier\n")
    assert [cue.text for cue in cues] == ["Later", "Earlier"]


def test_default_mode_never_raises_on_malformed_input() -> None:
    cues = parse_cues("intro\nbroken --> also broken\ntext\n")
    assert cues == (SubtitleCue(start=0.0, end=0.0, text="text"),)


def test_strict_mode_raises_with_warnings() -> None:
    with pytest.raises(SubtitleParseError) as excinfo:
        parse_cues("broken --> 00:02,000\ntext\n", strict=True)
    assert excinfo.value.warnings[0].kind == TIMESTAMP_FALLBACK
    assert excinfo.value.warnings[0].line_number == 1


def test_strict_mode_accepts_clean_input() -> None:
    assert len(parse_cues(WEBVTT_SAMPLE, strict=True)) == 2
