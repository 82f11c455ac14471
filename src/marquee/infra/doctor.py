from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from marquee.infra.config import AppConfig
from marquee.infra.ffmpeg import locate_encoder


@dataclass(frozen=True)
class ReadinessCheck:
    name: str
    ok: bool
    detail: str
    remedy: str | None = None


@dataclass(frozen=True)
class ReadinessReport:
    checks: tuple[ReadinessCheck, ...]

    @property
    def failures(self) -> tuple[ReadinessCheck, ...]:
        return tuple(check for check in self.checks if not check.ok)

    @property
    def ok(self) -> bool:
        return not self.failures


def check_encoder() -> ReadinessCheck:
    encoder = locate_encoder()
    if not encoder.available:
        return ReadinessCheck(
            name="ffmpeg",
            ok=False,
            detail="not found in PATH",
            remedy="Install ffmpeg; MKV files are transcoded to MP4 on the fly.",
        )
    return ReadinessCheck(
        name="ffmpeg",
        ok=True,
        detail=f"{encoder.path} ({encoder.version or 'version unknown'})",
    )


def check_movie_directory(path: Path | None) -> ReadinessCheck:
    if path is None:
        return ReadinessCheck(
            name="Movie directory",
            ok=False,
            detail="not configured",
            remedy="Set MOVIE_DIRECTORY or pass --movie-dir.",
        )
    if not path.is_dir():
        return ReadinessCheck(
            name="Movie directory",
            ok=False,
            detail=f"{path} is not a directory",
            remedy="Point MOVIE_DIRECTORY at the folder holding one sub-folder per movie.",
        )
    if not os.access(path, os.R_OK | os.X_OK):
        return ReadinessCheck(
            name="Movie directory",
            ok=False,
            detail=f"{path} is not readable",
            remedy="Grant read access to the server user.",
        )
    return ReadinessCheck(name="Movie directory", ok=True, detail=str(path))


def collect_doctor_report(config: AppConfig) -> ReadinessReport:
    return ReadinessReport(
        checks=(check_encoder(), check_movie_directory(config.movie_directory)),
    )


def render_doctor_report(report: ReadinessReport) -> str:
    passed = len(report.checks) - len(report.failures)
    lines = [f"marquee doctor: {passed}/{len(report.checks)} checks passed"]
    for check in report.checks:
        mark = "ok" if check.ok else "missing"
        lines.append(f"- {check.name} [{mark}] {check.detail}")
        if check.remedy:
            lines.append(f"    fix: {check.remedy}")
    return "\n".join(lines)
