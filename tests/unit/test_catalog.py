from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from marquee.core.catalog import (
    JsonCatalogProvider,
    describe_subtitle_track,
    length_to_seconds,
    movie_from_payload,
    sort_movies,
    toggle_sort,
)
from marquee.schemas.movie import MovieRecord


def _movie(title: str, length: str, day: int) -> MovieRecord:
    return MovieRecord(
        id=title.lower(),
        title=title,
        length=length,
        last_updated=datetime(2024, 1, day, tzinfo=timezone.utc),
    )


def test_describe_subtitle_track_maps_known_language_code() -> None:
    track = describe_subtitle_track("heat-abc", "Heat.en.srt")
    assert track.language == "English"
    assert track.locator == "/api/subtitles/heat-abc?fileName=Heat.en.srt"


def test_describe_subtitle_track_vn_and_vi_are_vietnamese() -> None:
    assert describe_subtitle_track("m", "a.vn.vtt").language == "Vietnamese"
    assert describe_subtitle_track("m", "a.VI.vtt").language == "Vietnamese"


def test_describe_subtitle_track_unknown_code_is_upper_cased() -> None:
    assert describe_subtitle_track("m", "a.de.srt").language == "DE"


def test_describe_subtitle_track_without_code_is_undetermined() -> None:
    track = describe_subtitle_track("m", "My Movie (2001).srt")
    assert track.language == "Undetermined"
    assert track.locator == "/api/subtitles/m?fileName=My%20Movie%20(2001).srt"


def test_describe_subtitle_track_escapes_reserved_characters() -> None:
    track = describe_subtitle_track("m", "a&b/c.en.vtt")
    assert track.locator.endswith("fileName=a%26b%2Fc.en.vtt")


def test_length_to_seconds() -> None:
    assert length_to_seconds("90:30") == 5430
    assert length_to_seconds("N/A") == 0
    assert length_to_seconds("1:02:03") == 0
    assert length_to_seconds("ab:cd") == 0


def test_sort_movies_by_title_is_case_insensitive() -> None:
    movies = [_movie("zodiac", "10:00", 1), _movie("Alien", "20:00", 2), _movie("brazil", "N/A", 3)]
    assert [m.title for m in sort_movies(movies)] == ["Alien", "brazil", "zodiac"]
    assert [m.title for m in sort_movies(movies, direction="desc")] == ["zodiac", "brazil", "Alien"]


def test_sort_movies_by_length_and_last_updated() -> None:
    movies = [_movie("A", "10:00", 3), _movie("B", "N/A", 1), _movie("C", "02:30", 2)]
    assert [m.title for m in sort_movies(movies, key="length")] == ["B", "C", "A"]
    assert [m.title for m in sort_movies(movies, key="lastUpdated", direction="desc")] == ["A", "C", "B"]


def test_sort_movies_rejects_unknown_key() -> None:
    with pytest.raises(ValueError, match="Unsupported sort key"):
        sort_movies([], key="rating")


def test_toggle_sort() -> None:
    assert toggle_sort("title", "asc", "title") == ("title", "desc")
    assert toggle_sort("title", "desc", "title") == ("title", "asc")
    assert toggle_sort("title", "desc", "length") == ("length", "asc")


def test_movie_from_payload_reads_api_shape() -> None:
    movie = movie_from_payload(
        {
            "id": "heat-abc",
            "title": "Heat",
            "videoUrl": "/movies/heat/heat.mkv",
            "videoExtension": ".mkv",
            "length": "N/A",
            "lastUpdated": "2024-05-01T10:00:00.000Z",
            "subtitles": [{"language": "English", "vttUrl": "/api/subtitles/heat-abc?fileName=heat.en.srt"}],
            "originalFolderName": "heat",
        }
    )
    assert movie.last_updated == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)
    assert movie.subtitles[0].language == "English"
    assert movie.video_extension == ".mkv"


def test_movie_from_payload_requires_id() -> None:
    with pytest.raises(ValueError, match="'id'"):
        movie_from_payload({"title": "x", "lastUpdated": "2024-01-01T00:00:00"})


def test_json_catalog_provider(tmp_path: Path) -> None:
    path = tmp_path / "movies.json"
    path.write_text(
        json.dumps([{"id": "a", "title": "A", "lastUpdated": "2024-01-01T00:00:00Z", "subtitles": []}]),
        encoding="utf-8",
    )
    movies = JsonCatalogProvider(path).list_movies()
    assert [movie.id for movie in movies] == ["a"]
    assert movies[0].subtitles == ()


def test_json_catalog_provider_rejects_non_list(tmp_path: Path) -> None:
    path = tmp_path / "movies.json"
    path.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError, match="JSON array"):
        JsonCatalogProvider(path).list_movies()


def test_movie_from_payload_rejects_non_object_entry() -> None:
    with pytest.raises(ValueError, match="must be a JSON object"):
        movie_from_payload(1)


def test_movie_from_payload_requires_subtitle_locator() -> None:
    with pytest.raises(ValueError, match="'vttUrl'"):
        movie_from_payload(
            {
                "id": "a",
                "title": "A",
                "lastUpdated": "2024-01-01T00:00:00Z",
                "subtitles": [{"language": "English"}],
            }
        )


def test_movie_from_payload_rejects_non_list_subtitles() -> None:
    with pytest.raises(ValueError, match="subtitles must be a JSON array"):
        movie_from_payload(
            {"id": "a", "title": "A", "lastUpdated": "2024-01-01T00:00:00Z", "subtitles": "en"}
        )
