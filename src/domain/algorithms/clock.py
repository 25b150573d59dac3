from __future__ import annotations

import math

MINUTES_PER_DAY = 24 * 60


def parse_time_to_minutes(raw: str) -> int:
    """Parse an "HH:MM" clock time into minutes since midnight.

    Raises ValueError for anything that is not two non-negative integer fields
    with minutes below 60.
    """

    hh, mm = raw.strip().split(":")
    hours = int(hh)
    minutes = int(mm)
    if hours < 0 or not (0 <= minutes < 60):
        raise ValueError(f"Invalid clock time: {raw!r}")
    return hours * 60 + minutes


def format_time_from_minutes(total_minutes: float) -> str:
    """Format minutes as zero-padded "HH:MM", wrapping at 24h (no day rollover)."""

    # Half minutes round up.
    minutes_of_day = math.floor(total_minutes + 0.5) % MINUTES_PER_DAY
    return f"{minutes_of_day // 60:02d}:{minutes_of_day % 60:02d}"
