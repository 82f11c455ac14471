from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Sequence

from marquee.core.timestamp import TIMESTAMP_FALLBACK, inspect_timestamp
from marquee.schemas.subtitle import SubtitleCue

logger = logging.getLogger(__name__)

WEBVTT_HEADER = "WEBVTT"
CUE_TIMING_ARROW = "-->"
FORMAT_WEBVTT = "webvtt"
FORMAT_SRT = "srt"

ORPHAN_LINE = "orphan_line"
EXTRA_ARROW = "extra_arrow"
INVERTED_WINDOW = "inverted_window"

_LINE_BREAK = re.compile(r"\r?\n")
_EDGE_WHITESPACE = re.compile(r"^[\s\ufeff]+|[\s\ufeff]+$")
_SEQUENCE_NUMBER = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class ParseWarning:
    line_number: int
    kind: str
    line: str
    message: str


@dataclass(frozen=True)
class ParseReport:
    format: str
    cues: tuple[SubtitleCue, ...]
    warnings: tuple[ParseWarning, ...]

    @property
    def ok(self) -> bool:
        return not self.warnings


class SubtitleParseError(ValueError):
    """Raised by strict parsing when the input produced warnings."""

    def __init__(self, warnings: Sequence[ParseWarning]) -> None:
        self.warnings = tuple(warnings)
        first = self.warnings[0]
        super().__init__(
            f"{len(self.warnings)} subtitle parse warning(s); "
            f"first at line {first.line_number}: {first.message}"
        )


def _trim(line: str) -> str:
    return _EDGE_WHITESPACE.sub("", line)


def _numbered_lines(raw_text: str) -> list[tuple[int, str]]:
    lines: list[tuple[int, str]] = []
    for line_number, line in enumerate(_LINE_BREAK.split(raw_text), start=1):
        trimmed = _trim(line)
        if trimmed:
            lines.append((line_number, trimmed))
    return lines


def detect_subtitle_format(lines: Sequence[str]) -> str:
    """WebVTT when the first non-empty line is the bare header, else SRT."""
    if lines and lines[0] == WEBVTT_HEADER:
        return FORMAT_WEBVTT
    return FORMAT_SRT


def _is_skipped(line: str, subtitle_format: str) -> bool:
    if subtitle_format == FORMAT_WEBVTT:
        return line == WEBVTT_HEADER
    return _SEQUENCE_NUMBER.fullmatch(line) is not None


def _finalize(start: float, end: float, buffer: list[str]) -> SubtitleCue:
    return SubtitleCue(start=start, end=end, text=" ".join(buffer).strip())


def parse_cues_with_report(raw_text: str) -> ParseReport:
    """Parse WebVTT or SRT text and collect diagnostics along the way.

    The returned cues are exactly what :func:`parse_cues` returns; the
    warnings only describe lines that were dropped or degraded.
    """
    numbered = _numbered_lines(raw_text)
    subtitle_format = detect_subtitle_format([line for _, line in numbered])
    cues: list[SubtitleCue] = []
    warnings: list[ParseWarning] = []
    current: tuple[float, float] | None = None
    buffer: list[str] = []

    for line_number, line in numbered:
        if _is_skipped(line, subtitle_format):
            continue
        if CUE_TIMING_ARROW in line:
            if current is not None:
                cues.append(_finalize(*current, buffer))
            buffer = []
            pieces = line.split(CUE_TIMING_ARROW)
            if len(pieces) > 2:
                warnings.append(
                    ParseWarning(
                        line_number=line_number,
                        kind=EXTRA_ARROW,
                        line=line,
                        message=f"only the first two '{CUE_TIMING_ARROW}' fields are used",
                    )
                )
            bounds: list[float] = []
            for piece in pieces[:2]:
                parsed = inspect_timestamp(piece.strip())
                if parsed.issue is not None:
                    warnings.append(
                        ParseWarning(
                            line_number=line_number,
                            kind=parsed.issue,
                            line=line,
                            message=(
                                f"{parsed.detail}; using 0"
                                if parsed.issue == TIMESTAMP_FALLBACK
                                else parsed.detail
                            ),
                        )
                    )
                bounds.append(parsed.seconds)
            start, end = bounds
            if end < start:
                warnings.append(
                    ParseWarning(
                        line_number=line_number,
                        kind=INVERTED_WINDOW,
                        line=line,
                        message=f"cue ends ({end:.3f}s) before it starts ({start:.3f}s)",
                    )
                )
            current = (start, end)
        elif current is not None:
            buffer.append(line)
        else:
            warnings.append(
                ParseWarning(
                    line_number=line_number,
                    kind=ORPHAN_LINE,
                    line=line,
                    message="text before the first cue timing line was ignored",
                )
            )

    if current is not None:
        cues.append(_finalize(*current, buffer))

    logger.debug(
        "Parsed %d %s cues (%d warnings)", len(cues), subtitle_format, len(warnings)
    )
    return ParseReport(
        format=subtitle_format,
        cues=tuple(cues),
        warnings=tuple(warnings),
    )


def parse_cues(raw_text: str, *, strict: bool = False) -> tuple[SubtitleCue, ...]:
    """Parse WebVTT or SRT text into cues in file order.

    Malformed input never raises by default: bad timestamps become ``0`` and
    unrecognized lines are dropped. ``strict=True`` raises
    :class:`SubtitleParseError` if anything was dropped or degraded.
    """
    report = parse_cues_with_report(raw_text)
    if strict and report.warnings:
        raise SubtitleParseError(report.warnings)
    return report.cues
