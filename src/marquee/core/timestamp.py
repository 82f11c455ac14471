from __future__ import annotations

from dataclasses import dataclass
import math
import re

_INT_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)

TIMESTAMP_FALLBACK = "timestamp_fallback"
TIMESTAMP_TRAILING_TEXT = "timestamp_trailing_text"


class TimestampError(ValueError):
    """Raised by strict timestamp parsing."""


@dataclass(frozen=True)
class TimestampParse:
    seconds: float
    issue: str | None = None
    detail: str = ""


def _numeric_prefix(pattern: re.Pattern[str], value: str) -> tuple[str, bool] | None:
    match = pattern.match(value)
    if match is None:
        return None
    rest = value[match.end():].strip()
    return match.group(1), bool(rest)


def inspect_timestamp(raw: str) -> TimestampParse:
    """Parse ``[hh:]mm:ss[.fff]`` (``.`` or ``,`` separator) and report issues."""
    normalized = raw.strip().replace(",", ".", 1)
    parts = normalized.split(":")
    if len(parts) not in (2, 3):
        return TimestampParse(
            seconds=0.0,
            issue=TIMESTAMP_FALLBACK,
            detail=f"expected 2 or 3 ':'-separated fields in {raw!r}, got {len(parts)}",
        )

    *whole_parts, seconds_part = parts
    whole_values: list[int] = []
    trailing = False
    for part in whole_parts:
        prefix = _numeric_prefix(_INT_PREFIX, part)
        if prefix is None:
            return TimestampParse(
                seconds=0.0,
                issue=TIMESTAMP_FALLBACK,
                detail=f"non-numeric field {part!r} in {raw!r}",
            )
        digits, has_rest = prefix
        whole_values.append(int(digits))
        trailing = trailing or has_rest

    prefix = _numeric_prefix(_FLOAT_PREFIX, seconds_part)
    if prefix is None:
        return TimestampParse(
            seconds=0.0,
            issue=TIMESTAMP_FALLBACK,
            detail=f"non-numeric seconds {seconds_part!r} in {raw!r}",
        )
    number, has_rest = prefix
    seconds = float(number)
    trailing = trailing or has_rest

    if len(whole_values) == 2:
        hours, minutes = whole_values
        total = (hours * 3600) + (minutes * 60) + seconds
    else:
        total = (whole_values[0] * 60) + seconds

    if trailing:
        return TimestampParse(
            seconds=total,
            issue=TIMESTAMP_TRAILING_TEXT,
            detail=f"ignored trailing text in {raw!r}",
        )
    return TimestampParse(seconds=total)


def parse_timestamp(raw: str, *, strict: bool = False) -> float:
    """Convert a WebVTT or SRT timestamp to seconds.

    Unrecognized shapes fall back to ``0.0``. With ``strict=True`` any
    fallback or ignored trailing text raises :class:`TimestampError` instead.
    """
    result = inspect_timestamp(raw)
    if strict and result.issue is not None:
        raise TimestampError(result.detail)
    return result.seconds


def format_clock(seconds: float) -> str:
    """Format a playback position as ``MM:SS``."""
    if not math.isfinite(seconds):
        seconds = 0.0
    minutes = math.floor(seconds / 60)
    secs = math.floor(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"
