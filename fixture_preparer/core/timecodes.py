"""Pure helpers to parse and format ffmpeg-style timecodes.

Timecodes are accepted as ``HH:MM:SS[.mmm]``, ``MM:SS[.mmm]`` or a plain number
of seconds (int, float or numeric string).
"""
from __future__ import annotations

import math
from typing import Union

Timecode = Union[str, int, float]


def parse_timecode(value: Timecode) -> float:
    """Convert a timecode to seconds.

    Raises ``ValueError`` for malformed or negative values.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid timecode: {value!r}")
    if isinstance(value, (int, float)):
        seconds = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty timecode")
        parts = text.split(':')
        if len(parts) > 3:
            raise ValueError(f"Invalid timecode: {value!r}")
        try:
            numbers = [float(p) for p in parts]
        except ValueError:
            raise ValueError(f"Invalid timecode: {value!r}")
        if not all(math.isfinite(n) for n in numbers):
            raise ValueError(f"Invalid timecode: {value!r}")
        # Only the last field may carry a fraction, the others must be whole
        for n in numbers[:-1]:
            if n != int(n):
                raise ValueError(f"Invalid timecode: {value!r}")
        if len(numbers) > 1 and numbers[-1] >= 60:
            raise ValueError(f"Seconds out of range in timecode: {value!r}")
        if len(numbers) == 3 and numbers[1] >= 60:
            raise ValueError(f"Minutes out of range in timecode: {value!r}")
        seconds = 0.0
        for n in numbers:
            seconds = seconds * 60 + n
    else:
        raise ValueError(f"Unsupported timecode type: {type(value).__name__}")

    if not math.isfinite(seconds):
        raise ValueError(f"Invalid timecode: {value!r}")
    if seconds < 0:
        raise ValueError(f"Negative timecode: {value!r}")
    return seconds


def format_timecode(seconds: float) -> str:
    """Format seconds as ``HH:MM:SS``, adding ``.mmm`` for fractional values."""
    total_ms = int(round(float(seconds) * 1000))
    if total_ms < 0:
        raise ValueError(f"Negative timecode: {seconds!r}")
    hours, rem = divmod(total_ms, 3600 * 1000)
    minutes, rem = divmod(rem, 60 * 1000)
    secs, ms = divmod(rem, 1000)
    text = f"{hours:02d}:{minutes:02d}:{secs:02d}"
    if ms:
        text += f".{ms:03d}"
    return text
