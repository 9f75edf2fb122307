import pytest

from scheduling.slots import ALL_SLOTS, DAY_END, format_time_12h, is_slot_id, slot_range


def test_day_has_24_ordered_slots():
    assert len(ALL_SLOTS) == 24
    assert ALL_SLOTS[0] == "00:00"
    assert ALL_SLOTS[-1] == "23:00"
    assert list(ALL_SLOTS) == sorted(ALL_SLOTS)
    assert len(set(ALL_SLOTS)) == 24


def test_slot_range_is_half_open():
    assert slot_range("10:00", "13:00") == ["10:00", "11:00", "12:00"]
    assert slot_range("09:00", "09:00") == []
    assert slot_range("12:00", "10:00") == []


def test_day_end_bound_includes_last_slot():
    assert slot_range("22:00", DAY_END) == ["22:00", "23:00"]


@pytest.mark.parametrize("value", ["9:00", "24:00", "10:30", "11:00\n", " 11:00", "", None, 10])
def test_is_slot_id_rejects_malformed(value):
    assert not is_slot_id(value)


@pytest.mark.parametrize("slot,expected", [
    ("00:00", "12:00 AM"),
    ("09:00", "9:00 AM"),
    ("12:00", "12:00 PM"),
    ("23:00", "11:00 PM"),
])
def test_format_time_12h(slot, expected):
    assert format_time_12h(slot) == expected
