"""
Fixed hourly partition of a day.

Slot ids are zero-padded "HH:00" strings so that plain string comparison
matches chronological order. Range math below depends on that.
"""
import re

SLOTS_PER_DAY = 24

# exclusive end bound for a range that runs to midnight
DAY_END = "24:00"

ALL_SLOTS = tuple(f"{h:02d}:00" for h in range(SLOTS_PER_DAY))

_SLOT_RE = re.compile(r"(?:[01]\d|2[0-3]):00")


def is_slot_id(value) -> bool:
    return isinstance(value, str) and _SLOT_RE.fullmatch(value) is not None


def is_range_bound(value) -> bool:
    return is_slot_id(value) or value == DAY_END


def slot_range(start: str, end: str) -> list:
    """Slots s with start <= s < end, ascending. Empty when end <= start."""
    return [s for s in ALL_SLOTS if start <= s < end]


def format_time_12h(slot: str) -> str:
    hours, minutes = (int(part) for part in slot.split(":"))
    period = "PM" if 12 <= hours < 24 else "AM"
    h12 = hours % 12 or 12
    return f"{h12}:{minutes:02d} {period}"
