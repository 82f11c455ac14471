from __future__ import annotations

import re

LANGUAGE_LABELS: dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "vn": "Vietnamese",
    "vi": "Vietnamese",
}
UNDETERMINED_LANGUAGE = "Undetermined"

_LANGUAGE_SUFFIX_PATTERN = re.compile(r"\.([a-zA-Z]{2})\.(vtt|srt)$")


def language_code_from_filename(file_name: str) -> str | None:
    """Return the two-letter code in ``movie.en.srt`` style names."""
    match = _LANGUAGE_SUFFIX_PATTERN.search(file_name)
    return match.group(1) if match else None


def language_label(code: str | None) -> str:
    if code is None:
        return UNDETERMINED_LANGUAGE
    value = code.strip()
    if not value:
        return UNDETERMINED_LANGUAGE
    return LANGUAGE_LABELS.get(value.lower(), value.upper())
