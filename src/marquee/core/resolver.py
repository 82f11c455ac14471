from __future__ import annotations

from typing import Sequence

from marquee.schemas.subtitle import SubtitleCue


def find_active_cue(
    cues: Sequence[SubtitleCue], current_time: float
) -> SubtitleCue | None:
    """Return the first cue whose closed window contains ``current_time``.

    Cues are scanned in file order, so overlapping cues resolve to the
    earlier one and unsorted input is handled as-is.
    """
    for cue in cues:
        if cue.start <= current_time <= cue.end:
            return cue
    return None


def resolve_active_text(cues: Sequence[SubtitleCue], current_time: float) -> str:
    cue = find_active_cue(cues, current_time)
    return cue.text if cue is not None else ""
