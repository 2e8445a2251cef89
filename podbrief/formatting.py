"""Human-readable durations and timestamps for CLI output."""

from typing import Optional


def format_duration(seconds: Optional[int]) -> str:
    """3725 -> "1:02:05", 125 -> "2:05", unknown -> "--:--"."""
    if not seconds:
        return "--:--"
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_timestamp(seconds: int) -> str:
    """3725 -> "1:02:05", 65 -> "01:05"."""
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"
