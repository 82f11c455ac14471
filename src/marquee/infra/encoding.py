from __future__ import annotations

import codecs
from pathlib import Path

_BOM_ENCODINGS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


def detect_bom(data: bytes) -> tuple[str, int]:
    """Return ``(encoding, bom_length)``; UTF-8 with no BOM when none matches."""
    for bom, encoding in _BOM_ENCODINGS:
        if data.startswith(bom):
            return encoding, len(bom)
    return "utf-8", 0


def decode_subtitle_bytes(data: bytes) -> str:
    encoding, bom_length = detect_bom(data)
    return data[bom_length:].decode(encoding, errors="replace")


def read_subtitle_file(path: Path) -> str:
    return decode_subtitle_bytes(path.read_bytes())
