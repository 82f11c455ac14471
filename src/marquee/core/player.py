from __future__ import annotations

from concurrent.futures import Executor, Future
import logging
import threading
from typing import Callable, Sequence

from marquee.core.resolver import resolve_active_text
from marquee.core.subtitle import parse_cues
from marquee.schemas.movie import MovieRecord
from marquee.schemas.subtitle import SubtitleCue, SubtitleTrack

logger = logging.getLogger(__name__)

SubtitleFetcher = Callable[[SubtitleTrack], str]


class PlayerSession:
    """Subtitle state for one player: selected track, cues and overlay text.

    Track changes are numbered. A change only takes effect if no newer change
    was started in the meantime, and the cue tuple is swapped in one step, so
    a reader sees either the old sequence or the new one, never a mix.
    """

    def __init__(self, fetch_subtitle: SubtitleFetcher, *, strict: bool = False) -> None:
        self._fetch_subtitle = fetch_subtitle
        self._strict = strict
        self._lock = threading.Lock()
        self._generation = 0
        self._movie: MovieRecord | None = None
        self._track: SubtitleTrack | None = None
        self._pending_track: SubtitleTrack | None = None
        self._cues: tuple[SubtitleCue, ...] = ()
        self._current_time = 0.0
        self._current_text = ""

    @property
    def movie(self) -> MovieRecord | None:
        return self._movie

    @property
    def track(self) -> SubtitleTrack | None:
        return self._track

    @property
    def pending_track(self) -> SubtitleTrack | None:
        return self._pending_track

    @property
    def cues(self) -> tuple[SubtitleCue, ...]:
        return self._cues

    @property
    def current_time(self) -> float:
        return self._current_time

    @property
    def current_text(self) -> str:
        return self._current_text

    def select_movie(self, movie: MovieRecord) -> int:
        """Reset playback position and select the movie's first subtitle track."""
        logger.info("Selected movie %s (%d subtitle tracks)", movie.id, len(movie.subtitles))
        default_track = movie.subtitles[0] if movie.subtitles else None
        return self._apply(self._begin(default_track, movie=movie), default_track)

    def select_track(self, track: SubtitleTrack | None) -> int:
        """Switch tracks synchronously. Returns the change token that was applied."""
        return self._apply(self.begin_track_change(track), track)

    def _apply(self, token: int, track: SubtitleTrack | None) -> int:
        if track is None:
            return token
        self.complete_track_change(token, self._load(track))
        return token

    def select_track_in_background(
        self, track: SubtitleTrack | None, executor: Executor
    ) -> Future[bool]:
        """Fetch and parse on ``executor``; resolves to whether the result was applied."""
        token = self.begin_track_change(track)
        if track is None:
            done: Future[bool] = Future()
            done.set_result(True)
            return done
        return executor.submit(
            lambda: self.complete_track_change(token, self._load(track))
        )

    def begin_track_change(self, track: SubtitleTrack | None) -> int:
        """Register a new selection and supersede any change still in flight.

        The previous cues stay visible until :meth:`complete_track_change`
        commits, except that turning subtitles off clears them at once.
        """
        return self._begin(track)

    def _begin(self, track: SubtitleTrack | None, *, movie: MovieRecord | None = None) -> int:
        with self._lock:
            self._generation += 1
            token = self._generation
            self._pending_track = track
            if movie is not None:
                self._movie = movie
                self._current_time = 0.0
                self._current_text = ""
            if track is None:
                self._track = None
                self._cues = ()
                self._current_text = ""
        logger.debug("Track change %d started: %s", token, track)
        return token

    def complete_track_change(self, token: int, cues: Sequence[SubtitleCue]) -> bool:
        with self._lock:
            if token != self._generation:
                logger.debug(
                    "Discarding track change %d, superseded by %d", token, self._generation
                )
                return False
            self._track = self._pending_track
            self._cues = tuple(cues)
            self._current_text = resolve_active_text(self._cues, self._current_time)
        logger.info("Loaded %d cues for %s", len(self._cues), self._track)
        return True

    def on_time_update(self, current_time: float) -> str:
        with self._lock:
            self._current_time = current_time
            self._current_text = resolve_active_text(self._cues, current_time)
            return self._current_text

    def _load(self, track: SubtitleTrack) -> tuple[SubtitleCue, ...]:
        try:
            return parse_cues(self._fetch_subtitle(track), strict=self._strict)
        except Exception:
            logger.exception("Failed to load subtitles from %s", track.locator)
            return ()
