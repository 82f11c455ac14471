from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_LOG_LEVEL = "warning"
SUPPORTED_LOG_LEVELS = {"debug", "info", "warning", "error", "critical"}
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class AppConfig:
    movie_directory: Path | None
    log_level: str
    strict_subtitles: bool


def resolve_movie_directory(custom_path: Path | None = None) -> Path | None:
    if custom_path is not None:
        return custom_path.expanduser().resolve()
    env_path = os.getenv("MOVIE_DIRECTORY")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return None


def normalize_log_level(value: str) -> str:
    level = value.strip().lower()
    if level not in SUPPORTED_LOG_LEVELS:
        raise ValueError(
            f"Unsupported log level '{value}'. Allowed: {sorted(SUPPORTED_LOG_LEVELS)}"
        )
    return level


def parse_flag(value: str) -> bool:
    flag = value.strip().lower()
    if flag in _TRUTHY:
        return True
    if flag in _FALSY:
        return False
    raise ValueError(f"Unsupported boolean value '{value}'. Use one of: 1/0, true/false, yes/no, on/off")


def build_app_config(
    *,
    movie_directory: Path | None = None,
    log_level: str | None = None,
    strict_subtitles: bool | None = None,
) -> AppConfig:
    if log_level is None:
        log_level = os.getenv("MARQUEE_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    if strict_subtitles is None:
        strict_subtitles = parse_flag(os.getenv("MARQUEE_STRICT_SUBTITLES", ""))
    return AppConfig(
        movie_directory=resolve_movie_directory(movie_directory),
        log_level=normalize_log_level(log_level),
        strict_subtitles=strict_subtitles,
    )
