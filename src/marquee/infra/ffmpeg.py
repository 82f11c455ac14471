from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class EncoderLocation:
    path: Path | None
    version: str | None

    @property
    def available(self) -> bool:
        return self.path is not None


def locate_encoder(executable: str = "ffmpeg") -> EncoderLocation:
    """Locate the encoder the video transport shells out to for MKV files."""
    found = shutil.which(executable)
    if not found:
        return EncoderLocation(path=None, version=None)
    proc = subprocess.run(
        [found, "-version"],
        capture_output=True,
        text=True,
        check=False,
    )
    version = None
    if proc.returncode == 0 and proc.stdout:
        version = proc.stdout.splitlines()[0].strip()
    return EncoderLocation(path=Path(found), version=version)
