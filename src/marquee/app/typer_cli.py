from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from marquee.core.catalog import JsonCatalogProvider, sort_movies
from marquee.core.player import PlayerSession
from marquee.core.subtitle import ParseReport, parse_cues_with_report
from marquee.core.timestamp import TimestampError, format_clock, parse_timestamp
from marquee.infra.config import build_app_config
from marquee.infra.doctor import collect_doctor_report, render_doctor_report
from marquee.infra.encoding import read_subtitle_file
from marquee.infra.language import language_code_from_filename, language_label
from marquee.infra.logs import configure_logging
from marquee.infra.storage import cues_to_payload, ensure_directory, write_json
from marquee.schemas.subtitle import SubtitleTrack

app = typer.Typer(
    name="marquee",
    add_completion=False,
    help="Inspect movie subtitles and replay them the way the player shows them.",
)
console = Console()


def _require_file(path: Path) -> None:
    if not path.exists() or not path.is_file():
        raise typer.BadParameter(f"Subtitle file not found: {path}")


def _load_report(path: Path) -> ParseReport:
    _require_file(path)
    return parse_cues_with_report(read_subtitle_file(path))


def _parse_time_argument(value: str) -> float:
    if ":" in value:
        try:
            return parse_timestamp(value, strict=True)
        except TimestampError as exc:
            raise typer.BadParameter(str(exc), param_hint="TIME") from exc
    try:
        return float(value)
    except ValueError as exc:
        raise typer.BadParameter(
            f"Expected seconds or [hh:]mm:ss[.fff], got {value!r}", param_hint="TIME"
        ) from exc


def _print_warnings(report: ParseReport) -> None:
    for warning in report.warnings:
        console.print(
            f"[yellow]line {warning.line_number}[/yellow] {warning.kind}: "
            f"{escape(warning.message)}"
        )


@app.callback()
def main(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="debug|info|warning|error (default: MARQUEE_LOG_LEVEL or warning).",
    ),
) -> None:
    try:
        config = build_app_config(log_level=log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    configure_logging(config.log_level)


@app.command("cues")
def cues_command(
    input_path: Path = typer.Argument(..., help="WebVTT or SRT subtitle file."),
    strict: bool = typer.Option(
        False, "--strict", help="Fail when any line was dropped or degraded."
    ),
    output_path: Path | None = typer.Option(
        None, "--output", "-o", help="Also write the parsed cues as JSON."
    ),
) -> None:
    """Parse a subtitle file and list its cues."""
    report = _load_report(input_path)
    strict = strict or build_app_config().strict_subtitles

    table = Table(title=f"{input_path.name} ({report.format}, {len(report.cues)} cues)")
    table.add_column("#", justify="right")
    table.add_column("start", justify="right")
    table.add_column("end", justify="right")
    table.add_column("text")
    for index, cue in enumerate(report.cues, start=1):
        table.add_row(str(index), f"{cue.start:.3f}", f"{cue.end:.3f}", escape(cue.text))
    console.print(table)
    _print_warnings(report)

    if output_path is not None:
        ensure_directory(output_path.parent)
        write_json(output_path, cues_to_payload(report.cues))
        typer.echo(f"- cues json: {output_path}")
    if strict and report.warnings:
        typer.echo(f"[failed] {len(report.warnings)} parse warning(s) in strict mode.")
        raise typer.Exit(code=2)


@app.command("at")
def at_command(
    input_path: Path = typer.Argument(..., help="WebVTT or SRT subtitle file."),
    time: str = typer.Argument(..., help="Playback position: seconds or [hh:]mm:ss[.fff]."),
) -> None:
    """Print the subtitle text visible at a playback position."""
    current_time = _parse_time_argument(time)
    _require_file(input_path)
    session = PlayerSession(
        lambda track: read_subtitle_file(Path(track.locator)),
        strict=build_app_config().strict_subtitles,
    )
    session.select_track(SubtitleTrack(language="", locator=str(input_path)))
    typer.echo(session.on_time_update(current_time))


@app.command("check")
def check_command(
    input_paths: list[Path] = typer.Argument(..., help="Subtitle files to validate."),
) -> None:
    """Validate subtitle files before they are served to players.

    A file fails only on parse warnings; a header-only file passes with 0 cues.
    """
    for path in input_paths:
        _require_file(path)

    reports: list[tuple[Path, ParseReport]] = []
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task_id = progress.add_task(description="Checking subtitles...", total=len(input_paths))
        for path in input_paths:
            reports.append((path, parse_cues_with_report(read_subtitle_file(path))))
            progress.update(task_id, advance=1)

    failed = 0
    for path, report in reports:
        status = "PASS" if report.ok else "WARN"
        if status != "PASS":
            failed += 1
        typer.echo(
            f"- [{status}] {path}: format={report.format} cues={len(report.cues)} "
            f"warnings={len(report.warnings)}"
        )
        for warning in report.warnings:
            typer.echo(f"    line {warning.line_number} {warning.kind}: {warning.message}")
    if failed:
        raise typer.Exit(code=1)


@app.command("play")
def play_command(
    input_path: Path = typer.Argument(..., help="WebVTT or SRT subtitle file."),
    start: float = typer.Option(0.0, "--start", help="First playback position in seconds."),
    end: float | None = typer.Option(
        None, "--end", help="Last playback position (default: end of the last cue)."
    ),
    step: float = typer.Option(
        0.25, "--step", help="Seconds between simulated time updates."
    ),
) -> None:
    """Replay time updates and print each overlay change."""
    if step <= 0.0:
        raise typer.BadParameter(f"step must be > 0, got {step}", param_hint="--step")
    _require_file(input_path)
    config = build_app_config()
    session = PlayerSession(
        lambda track: read_subtitle_file(Path(track.locator)),
        strict=config.strict_subtitles,
    )
    session.select_track(
        SubtitleTrack(
            language=language_label(language_code_from_filename(input_path.name)),
            locator=str(input_path),
        )
    )
    if not session.cues:
        typer.echo(f"[failed] No subtitle cues found in {input_path}")
        raise typer.Exit(code=2)
    last_position = end if end is not None else max(cue.end for cue in session.cues)

    shown: str | None = None
    tick = 0
    position = start
    while position <= last_position:
        text = session.on_time_update(position)
        if text != shown:
            typer.echo(f"[{format_clock(position)}] {text}" if text else f"[{format_clock(position)}]")
            shown = text
        tick += 1
        position = start + tick * step


@app.command("movies")
def movies_command(
    catalog_path: Path = typer.Argument(..., help="Saved /api/movies JSON document."),
    sort_key: str = typer.Option("title", "--sort", help="title|length|last_updated"),
    descending: bool = typer.Option(False, "--desc", help="Sort in descending order."),
) -> None:
    """List movies from a catalog snapshot."""
    if not catalog_path.exists():
        raise typer.BadParameter(f"Catalog not found: {catalog_path}")
    try:
        movies = sort_movies(
            JsonCatalogProvider(catalog_path).list_movies(),
            key=sort_key,
            direction="desc" if descending else "asc",
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    table = Table(title=f"{len(movies)} movies")
    table.add_column("title")
    table.add_column("length", justify="right")
    table.add_column("last updated")
    table.add_column("subtitles")
    for movie in movies:
        table.add_row(
            escape(movie.title),
            movie.length,
            movie.last_updated.strftime("%Y-%m-%d %H:%M"),
            escape(", ".join(track.language for track in movie.subtitles)) or "-",
        )
    console.print(table)


@app.command("doctor")
def doctor_command(
    movie_directory: Path | None = typer.Option(
        None, "--movie-dir", help="Movie library root (default: MOVIE_DIRECTORY)."
    ),
) -> None:
    """Check that ffmpeg and the movie directory are ready for serving."""
    report = collect_doctor_report(build_app_config(movie_directory=movie_directory))
    typer.echo(render_doctor_report(report))
    if not report.ok:
        raise typer.Exit(code=1)


def run() -> None:
    """Console-script entrypoint."""
    app()
