"""Reading-time estimate from raw post text."""

import math

from blogapi.models.post import ReadingTime

DEFAULT_WORDS_PER_MINUTE = 250


def compute_reading_time(
    raw: str, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE
) -> ReadingTime:
    """Estimate reading time for *raw*, frontmatter included.

    Words are whitespace-delimited tokens. ``text`` rounds minutes up, so any
    non-empty post reads as at least "1 min read".
    """
    if words_per_minute <= 0:
        raise ValueError("words_per_minute must be greater than zero")

    words = len(raw.split())
    minutes = words / words_per_minute
    return ReadingTime(
        text=f"{math.ceil(round(minutes, 2))} min read",
        minutes=minutes,
        words=words,
    )
