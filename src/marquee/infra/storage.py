from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

from marquee.schemas.subtitle import SubtitleCue


def ensure_directory(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_json(path: Path, payload: Any) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def cues_to_payload(cues: Sequence[SubtitleCue]) -> list[dict[str, Any]]:
    """Shape cues the way the subtitle API serializes them."""
    return [
        {"startTime": cue.start, "endTime": cue.end, "text": cue.text}
        for cue in cues
    ]
