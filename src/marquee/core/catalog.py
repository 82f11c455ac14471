from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol, Sequence
from urllib.parse import quote

from marquee.infra.language import language_code_from_filename, language_label
from marquee.schemas.movie import MovieRecord
from marquee.schemas.subtitle import SubtitleTrack

logger = logging.getLogger(__name__)

SORT_KEYS: tuple[str, ...] = ("title", "length", "last_updated")
SORT_DIRECTIONS: tuple[str, ...] = ("asc", "desc")
_SORT_KEY_ALIASES = {"lastupdated": "last_updated", "last-updated": "last_updated"}
# encodeURIComponent leaves these unescaped on top of quote()'s defaults.
_URI_COMPONENT_SAFE = "!*'()"


class MovieCatalogProvider(Protocol):
    def list_movies(self) -> list[MovieRecord]:
        ...


def subtitle_locator(movie_id: str, file_name: str) -> str:
    return f"/api/subtitles/{movie_id}?fileName={quote(file_name, safe=_URI_COMPONENT_SAFE)}"


def describe_subtitle_track(movie_id: str, file_name: str) -> SubtitleTrack:
    """Build the track descriptor for a subtitle file such as ``film.en.srt``."""
    return SubtitleTrack(
        language=language_label(language_code_from_filename(file_name)),
        locator=subtitle_locator(movie_id, file_name),
    )


def _parse_last_updated(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"lastUpdated must be an ISO-8601 string, got {value!r}")
    return datetime.fromisoformat(value.strip())


def _subtitle_from_payload(entry: Any) -> SubtitleTrack:
    if not isinstance(entry, dict):
        raise ValueError(f"Subtitle entry must be a JSON object, got {entry!r}")
    try:
        return SubtitleTrack(language=str(entry["language"]), locator=str(entry["vttUrl"]))
    except KeyError as exc:
        raise ValueError(f"Subtitle entry is missing required field {exc.args[0]!r}") from exc


def movie_from_payload(payload: Any) -> MovieRecord:
    """Build a record from one entry of the ``/api/movies`` response."""
    if not isinstance(payload, dict):
        raise ValueError(f"Movie entry must be a JSON object, got {payload!r}")
    try:
        movie_id = str(payload["id"])
        title = str(payload["title"])
    except KeyError as exc:
        raise ValueError(f"Movie entry is missing required field {exc.args[0]!r}") from exc
    subtitle_entries = payload.get("subtitles") or []
    if not isinstance(subtitle_entries, list):
        raise ValueError(f"Movie {movie_id!r} subtitles must be a JSON array.")
    subtitles = tuple(_subtitle_from_payload(entry) for entry in subtitle_entries)
    return MovieRecord(
        id=movie_id,
        title=title,
        length=str(payload.get("length", "N/A")),
        last_updated=_parse_last_updated(payload.get("lastUpdated")),
        video_url=payload.get("videoUrl"),
        video_extension=payload.get("videoExtension"),
        subtitles=subtitles,
    )


class JsonCatalogProvider:
    """Catalog backed by a saved ``/api/movies`` JSON document."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def list_movies(self) -> list[MovieRecord]:
        payload = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(payload, list):
            raise ValueError(f"Catalog {self.path} must contain a JSON array of movies.")
        movies = [movie_from_payload(entry) for entry in payload]
        logger.info("Loaded %d movies from %s", len(movies), self.path)
        return movies


def normalize_sort_key(value: str) -> str:
    key = value.strip().lower()
    key = _SORT_KEY_ALIASES.get(key, key)
    if key not in SORT_KEYS:
        raise ValueError(f"Unsupported sort key '{value}'. Allowed: {', '.join(SORT_KEYS)}")
    return key


def normalize_sort_direction(value: str) -> str:
    direction = value.strip().lower()
    if direction not in SORT_DIRECTIONS:
        raise ValueError(
            f"Unsupported sort direction '{value}'. Allowed: {', '.join(SORT_DIRECTIONS)}"
        )
    return direction


def length_to_seconds(length: str) -> int:
    """``MM:SS`` lengths sort by seconds; anything else (e.g. ``N/A``) sorts as 0."""
    parts = length.split(":")
    if len(parts) != 2:
        return 0
    try:
        minutes, seconds = (int(part) for part in parts)
    except ValueError:
        return 0
    return minutes * 60 + seconds


def _sort_value(movie: MovieRecord, key: str) -> Any:
    if key == "length":
        return length_to_seconds(movie.length)
    if key == "last_updated":
        return movie.last_updated.timestamp()
    return movie.title.lower()


def sort_movies(
    movies: Sequence[MovieRecord],
    key: str = "title",
    direction: str = "asc",
) -> list[MovieRecord]:
    key = normalize_sort_key(key)
    direction = normalize_sort_direction(direction)
    return sorted(
        movies,
        key=lambda movie: _sort_value(movie, key),
        reverse=direction == "desc",
    )


def toggle_sort(current_key: str, current_direction: str, clicked_key: str) -> tuple[str, str]:
    """Clicking the active column flips direction; a new column starts ascending."""
    current_key = normalize_sort_key(current_key)
    clicked_key = normalize_sort_key(clicked_key)
    if clicked_key == current_key:
        flipped = "desc" if normalize_sort_direction(current_direction) == "asc" else "asc"
        return current_key, flipped
    return clicked_key, "asc"
