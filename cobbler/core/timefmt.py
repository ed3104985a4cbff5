# cobbler/core/timefmt.py
import math
import re
import time
from dataclasses import dataclass
from email.utils import parsedate_to_datetime
from typing import Optional

_NUMBER = re.compile(r"\d+(\.\d+)?", re.ASCII)
# "Sat, 16 Jul 2022 12:34:56 +0300" and nothing looser
_STAMP = re.compile(r"[A-Za-z]{3}, \d{1,2} [A-Za-z]{3} \d{4} \d{2}:\d{2}:\d{2} [+-]\d{4}", re.ASCII)


@dataclass(frozen=True)
class TimestampResult:
    value: float  # epoch seconds
    parsed: bool  # False when value is the "now" fallback


def _to_float(value: str) -> Optional[float]:
    if not _NUMBER.fullmatch(value):
        return None
    return float(value)


def parse_duration(text: str) -> float:
    """
    "M:SS" -> seconds. Anything else (hours, signs, garbage, empty) is 0.0.
    """
    parts = (text or "").split(":")
    if len(parts) != 2:
        return 0.0

    mins = _to_float(parts[0])
    secs = _to_float(parts[1])
    if mins is None or secs is None:
        return 0.0

    total = mins * 60.0 + secs
    if not math.isfinite(total):
        return 0.0
    return total


def format_seconds(seconds: float) -> str:
    try:
        value = float(seconds)
    except (TypeError, ValueError):
        value = 0.0
    if not math.isfinite(value):
        value = 0.0

    # int() truncates toward zero, same as the station's own display
    mins = int(value / 60.0)
    secs = int(value - mins * 60.0)
    return f"{mins}:{secs:02d}"


def parse_timestamp_result(text: str, now: Optional[float] = None) -> TimestampResult:
    """
    Parse "Sat, 16 Jul 2022 12:34:56 +0300". Stamps without a usable offset
    are read as local time. Failures fall back to `now` (or the wall clock).
    """
    fallback = time.time() if now is None else now
    text = (text or "").strip()
    if not _STAMP.fullmatch(text):
        return TimestampResult(fallback, False)

    try:
        dt = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError, OverflowError):
        return TimestampResult(fallback, False)
    if dt is None:
        return TimestampResult(fallback, False)

    try:
        # naive datetimes are local time for .timestamp()
        return TimestampResult(dt.timestamp(), True)
    except (ValueError, OverflowError, OSError):
        return TimestampResult(fallback, False)


def parse_timestamp(text: str, now: Optional[float] = None) -> float:
    return parse_timestamp_result(text, now).value
