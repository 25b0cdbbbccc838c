import re

SECONDS_PER_DAY = 24 * 3600

_HMS_PATTERN = re.compile(r"^(\d{2}):(\d{2}):(\d{2})$")


def convert_to_seconds(hours=0, minutes=0, seconds=0):
    """
    Converts hours, minutes, and seconds into a total duration in seconds.

    Args:
        hours (int): Number of hours. Defaults to 0.
        minutes (int): Number of minutes. Defaults to 0.
        seconds (int): Number of seconds. Defaults to 0.

    Returns:
        int: The total duration in seconds.

    Raises:
        ValueError: If any input is negative.
    """
    if any(val < 0 for val in [hours, minutes, seconds]):
        raise ValueError("Time components cannot be negative.")
    return (hours * 3600) + (minutes * 60) + seconds


def parse_hms(time_str: str) -> int:
    """
    Parses a canonical 'HH:MM:SS' string into seconds since midnight.

    Hours run 00-23, minutes and seconds 00-59.

    Raises:
        ValueError: If the string is not a valid 'HH:MM:SS' time.
    """
    if not isinstance(time_str, str):
        raise ValueError(f"Expected an 'HH:MM:SS' string, got {type(time_str).__name__}.")
    match = _HMS_PATTERN.match(time_str.strip())
    if not match:
        raise ValueError(f"Invalid time '{time_str}', expected 'HH:MM:SS'.")
    hours, minutes, seconds = (int(part) for part in match.groups())
    if hours > 23 or minutes > 59 or seconds > 59:
        raise ValueError(f"Time '{time_str}' is out of range.")
    return convert_to_seconds(hours, minutes, seconds)


def format_seconds_to_hms(total_seconds):
    """
    Converts a total number of seconds into a human-readable HH:MM:SS string.
    """
    if total_seconds < 0:
        return "-Invalid Time-"

    # Ensure total_seconds is an integer for consistent calculation
    total_seconds = int(total_seconds)

    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02}:{minutes:02}:{seconds:02}"


def format_time_of_day(offset_seconds: int) -> str:
    """Renders an offset from midnight as a wall-clock 'HH:MM:SS', wrapping past 24h."""
    return format_seconds_to_hms(int(offset_seconds) % SECONDS_PER_DAY)


def format_seconds_to_ms(total_seconds: int) -> str:
    """
    Countdown rendering 'MM:SS'. The minutes field is not wrapped at an hour,
    so 3725 seconds renders as '62:05'.
    """
    total_seconds = max(0, int(total_seconds))
    minutes = total_seconds // 60
    seconds = total_seconds % 60
    return f"{minutes:02}:{seconds:02}"
