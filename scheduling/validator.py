from collections import namedtuple

from scheduling.errors import InvalidRange
from scheduling.slots import is_range_bound, is_slot_id, slot_range


class RangeCheck(namedtuple("RangeCheck", ["slots", "unavailable"])):
    __slots__ = ()

    @property
    def is_valid(self):
        return bool(self.slots) and not self.unavailable


def expand_range(start, end):
    """Hourly slots covered by [start, end). Raises InvalidRange if none."""
    if not is_slot_id(start):
        raise InvalidRange(f"Invalid start time: {start!r}")
    if not is_range_bound(end):
        raise InvalidRange(f"Invalid end time: {end!r}")

    slots = slot_range(start, end)
    if not slots:
        raise InvalidRange("Invalid time range selected.")
    return slots


def validate_range(start, end, available):
    """Check a range against a previously fetched availability snapshot.

    Only a fast answer for the UI; book_range re-checks against the store.
    """
    slots = expand_range(start, end)
    free = set(available)
    return RangeCheck(slots=slots, unavailable=[s for s in slots if s not in free])
