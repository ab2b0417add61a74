import math
from datetime import datetime
from typing import Iterable, Optional

MISSING_DATE = "data desconhecida"

# date-fns "pt" locale, MMM
PT_MONTHS = (
    "jan",
    "fev",
    "mar",
    "abr",
    "mai",
    "jun",
    "jul",
    "ago",
    "set",
    "out",
    "nov",
    "dez",
)


def calculate_reading_time(text: str) -> str:
    words = text.split()
    minutes = math.ceil(len(words) / 200) or 1
    return f"{minutes} min"


def reading_time_for_blocks(blocks: Iterable) -> str:
    """Reading time over every heading and body paragraph of a post."""
    parts = []
    for block in blocks:
        if block.heading:
            parts.append(block.heading)
        parts.extend(body.text for body in block.body)
    return calculate_reading_time(" ".join(parts))


def _as_datetime(value) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


def format_date(value, missing: str = MISSING_DATE) -> str:
    """Format as ``dd MMM yyyy`` (e.g. ``25 mar 2021``); absent dates get ``missing``."""
    date = _as_datetime(value)
    if date is None:
        return missing
    return f"{date.day:02d} {PT_MONTHS[date.month - 1]} {date.year}"


def format_time(value, missing: str = "") -> str:
    """Format as ``hh:mm`` (12-hour clock)."""
    date = _as_datetime(value)
    if date is None:
        return missing
    return date.strftime("%I:%M")
