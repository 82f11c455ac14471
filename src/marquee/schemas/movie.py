from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from marquee.schemas.subtitle import SubtitleTrack


@dataclass(frozen=True)
class MovieRecord:
    id: str
    title: str
    length: str
    last_updated: datetime
    video_url: str | None = None
    video_extension: str | None = None
    subtitles: tuple[SubtitleTrack, ...] = ()
