import pytest

from scheduling.availability import (
    OPTIMISTIC,
    PESSIMISTIC,
    get_available_slots,
    get_slot_board,
)
from scheduling.committer import book_range
from scheduling.errors import StorageUnavailable
from scheduling.slots import ALL_SLOTS


def test_empty_day_has_every_slot(fake_store, day):
    assert get_available_slots(fake_store, day) == list(ALL_SLOTS)


def test_booked_and_closed_slots_are_removed(fake_store, day):
    book_range(fake_store, day, "09:00", "11:00", "Alice", "0710000000")
    fake_store.add_closure(day, "15:00")

    free = get_available_slots(fake_store, day)

    assert "09:00" not in free
    assert "10:00" not in free
    assert "15:00" not in free
    assert len(free) == 21
    assert free == sorted(free)


def test_full_day_closure_blocks_everything(fake_store, day):
    fake_store.add_closure(day, None)
    assert get_available_slots(fake_store, day) == []


def test_inactive_closure_is_ignored(fake_store, day):
    fake_store.add_closure(day, None, is_active=False)
    fake_store.add_closure(day, "08:00", is_active=False)
    assert get_available_slots(fake_store, day) == list(ALL_SLOTS)


def test_cancelled_booking_frees_the_slot(fake_store, day):
    summary = book_range(fake_store, day, "18:00", "19:00", "Bob", "0771234567")
    fake_store.update_booking(summary.id, {"status": "cancelled"})
    assert "18:00" in get_available_slots(fake_store, day)


def test_other_dates_are_unaffected(fake_store, day):
    book_range(fake_store, day, "09:00", "10:00", "Alice", "0710000000")
    fake_store.add_closure(day, None)
    other = day.replace(day=day.day + 1)
    assert get_available_slots(fake_store, other) == list(ALL_SLOTS)


def test_repeated_reads_are_identical(fake_store, day):
    book_range(fake_store, day, "06:00", "08:00", "Alice", "0710000000")
    assert get_available_slots(fake_store, day) == get_available_slots(fake_store, day)


def test_fallback_policies(fake_store, day):
    fake_store.fail = True

    assert get_available_slots(fake_store, day, fallback=OPTIMISTIC) == list(ALL_SLOTS)
    assert get_available_slots(fake_store, day, fallback=PESSIMISTIC) == []
    with pytest.raises(StorageUnavailable):
        get_available_slots(fake_store, day)


def test_unknown_fallback_policy(fake_store, day):
    with pytest.raises(ValueError):
        get_available_slots(fake_store, day, fallback="maybe")


def test_slot_board_marks_state_and_price(fake_store, day):
    fake_store.prices["19:00"] = (4500, True)
    book_range(fake_store, day, "19:00", "20:00", "Alice", "0710000000")
    fake_store.add_closure(day, "07:00")

    board, degraded = get_slot_board(fake_store, day)
    by_id = {s["id"]: s for s in board}

    assert not degraded
    assert len(board) == 24
    assert by_id["19:00"]["booked"] and not by_id["19:00"]["is_available"]
    assert by_id["19:00"]["price"] == 4500
    assert by_id["19:00"]["is_prime_time"] is True
    assert by_id["07:00"]["closed"] and not by_id["07:00"]["is_available"]
    assert by_id["08:00"]["is_available"]


def test_slot_board_degrades_optimistically(fake_store, day):
    fake_store.fail = True
    board, degraded = get_slot_board(fake_store, day, fallback=OPTIMISTIC)
    assert degraded
    assert all(s["is_available"] for s in board)
