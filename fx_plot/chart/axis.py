"""
Wall-clock labels for the relative-seconds time axis.

A series' x coordinate is whole seconds since its first quote. The axis
shows the matching UTC clock time as "HH:MM", computed from the hour and
minute captured at the first quote. Hours wrap on the 24h clock face;
days are not tracked.
"""

import math

from ..utils.time import MINUTES_PER_HOUR, SECONDS_PER_HOUR, SECONDS_PER_MINUTE


def format_time_axis_label(elapsed_seconds: float, start_hour: float, start_minute: float) -> str:
    """
    Render an axis tick as a 24-hour "HH:MM" clock time.

    Args:
        elapsed_seconds: Seconds since the series' zero-time reference
        start_hour: UTC hour (0-23) of the zero-time reference
        start_minute: UTC minute (0-59) of the zero-time reference

    Returns:
        "HH:MM" label, or "" for ticks under a minute or non-finite ticks
    """
    if not math.isfinite(elapsed_seconds):
        return ""

    if elapsed_seconds < SECONDS_PER_MINUTE:
        return ""

    minutes_part = math.floor(elapsed_seconds / SECONDS_PER_MINUTE)

    if elapsed_seconds >= SECONDS_PER_HOUR:
        hours_part = minutes_part // MINUTES_PER_HOUR
        remaining_minutes = minutes_part % MINUTES_PER_HOUR

        if remaining_minutes + start_minute >= MINUTES_PER_HOUR:
            hour = (start_hour + hours_part + 1) % 24
            minute = start_minute + remaining_minutes - MINUTES_PER_HOUR
        else:
            hour = (start_hour + hours_part) % 24
            minute = start_minute + remaining_minutes
    else:
        if minutes_part + start_minute >= MINUTES_PER_HOUR:
            hour = (start_hour + 1) % 24
            minute = start_minute + minutes_part - MINUTES_PER_HOUR
        else:
            hour = start_hour
            minute = start_minute + minutes_part

    return f"{int(hour):02d}:{int(minute):02d}"
