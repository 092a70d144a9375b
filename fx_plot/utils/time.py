"""
Feed timestamp utilities.

Feed timestamps are integer nanoseconds since the Unix epoch. They are
authoritative for all series arithmetic: wall-clock time on the
ingesting host is never used to position a point.
"""

from datetime import datetime, timedelta, timezone

NANOS_PER_SECOND = 1_000_000_000
SECONDS_PER_MINUTE = 60
MINUTES_PER_HOUR = 60
SECONDS_PER_HOUR = SECONDS_PER_MINUTE * MINUTES_PER_HOUR

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def nanos_to_datetime(timestamp_ns: int) -> datetime:
    """
    Convert a feed timestamp to an aware UTC datetime.

    Integer arithmetic keeps microsecond precision for any value below
    2**64, which is beyond what float seconds can represent.

    Args:
        timestamp_ns: Nanoseconds since the Unix epoch

    Returns:
        UTC datetime truncated to microseconds
    """
    return _EPOCH + timedelta(microseconds=timestamp_ns // 1_000)


def utc_clock_reading(timestamp_ns: int) -> tuple[float, float]:
    """
    Get the UTC wall-clock hour and minute of a feed timestamp.

    Pure calendar arithmetic on the nanosecond count, so it cannot fail
    for a valid unsigned timestamp.

    Args:
        timestamp_ns: Nanoseconds since the Unix epoch

    Returns:
        Tuple of (hour 0-23, minute 0-59) as floats
    """
    seconds_of_day = (timestamp_ns // NANOS_PER_SECOND) % (24 * SECONDS_PER_HOUR)
    hour = seconds_of_day // SECONDS_PER_HOUR
    minute = (seconds_of_day % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE
    return float(hour), float(minute)


def elapsed_whole_seconds(timestamp_ns: int, zero_time_ref: int) -> float:
    """
    Whole seconds elapsed since a series' zero-time reference.

    Uses floor division on the nanosecond delta. A timestamp older than
    the reference yields a negative offset rather than wrapping.

    Args:
        timestamp_ns: Timestamp of the current quote
        zero_time_ref: Timestamp of the series' first quote

    Returns:
        Elapsed seconds as float
    """
    return float((timestamp_ns - zero_time_ref) // NANOS_PER_SECOND)


def format_feed_time(timestamp_ns: int) -> str:
    """Format a feed timestamp as ISO8601 for logging."""
    return nanos_to_datetime(timestamp_ns).isoformat()
