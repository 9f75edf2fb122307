import pytest

from scheduling.errors import InvalidRange
from scheduling.slots import ALL_SLOTS
from scheduling.validator import expand_range, validate_range


def test_range_inside_snapshot_is_valid():
    check = validate_range("10:00", "12:00", ALL_SLOTS)
    assert check.is_valid
    assert check.slots == ["10:00", "11:00"]
    assert check.unavailable == []


def test_range_reports_missing_slots():
    snapshot = [s for s in ALL_SLOTS if s != "11:00"]
    check = validate_range("10:00", "13:00", snapshot)
    assert not check.is_valid
    assert check.unavailable == ["11:00"]


@pytest.mark.parametrize("start,end", [
    ("09:00", "09:00"),
    ("12:00", "10:00"),
])
def test_empty_ranges_are_invalid(start, end):
    with pytest.raises(InvalidRange):
        expand_range(start, end)


@pytest.mark.parametrize("start,end", [
    ("9:00", "11:00"),
    ("09:30", "11:00"),
    (None, "11:00"),
    ("09:00", "25:00"),
    ("24:00", "24:00"),
    ("09:00", "11:00\n"),
    ("09:00\n", "11:00"),
])
def test_malformed_bounds_are_invalid(start, end):
    with pytest.raises(InvalidRange):
        validate_range(start, end, ALL_SLOTS)
