# utils/duration.py
from __future__ import annotations

import re

DEFAULT_DURATION = "0:00"

_ISO_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


def parse_duration(iso_value: str | None) -> str:
    """
    ISO 8601 duration from the videos endpoint ("PT1H5M30S") -> "1:05:30".

    Hours are not padded, minutes/seconds are. Anything that does not match
    gives DEFAULT_DURATION.
    """
    if not isinstance(iso_value, str):
        return DEFAULT_DURATION

    match = _ISO_RE.search(iso_value)
    if not match:
        return DEFAULT_DURATION

    hours, minutes, seconds = (int(g) if g else 0 for g in match.groups())
    # PT90S -> 1:30
    total = hours * 3600 + minutes * 60 + seconds
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def encode_duration(hours: int = 0, minutes: int = 0, seconds: int = 0) -> str:
    """Inverse of parse_duration for well-formed values."""
    parts = ["PT"]
    if hours:
        parts.append(f"{int(hours)}H")
    if minutes:
        parts.append(f"{int(minutes)}M")
    if seconds or len(parts) == 1:
        parts.append(f"{int(seconds)}S")
    return "".join(parts)
