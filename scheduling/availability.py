import logging

from scheduling.errors import StorageUnavailable
from scheduling.slots import ALL_SLOTS

logger = logging.getLogger(__name__)

# What to report when the store can't be read.
OPTIMISTIC = "optimistic"    # every slot free; customer reads keep selling
PESSIMISTIC = "pessimistic"  # nothing free; admin views never show stale slots
RAISE = "raise"

FALLBACK_POLICIES = (OPTIMISTIC, PESSIMISTIC, RAISE)


def _check_policy(fallback):
    if fallback not in FALLBACK_POLICIES:
        raise ValueError(f"Unknown availability fallback: {fallback!r}")


def _resolve(store, day):
    booked = set(store.confirmed_slots(day))
    closures = store.active_closures(day)

    if any(slot is None for slot in closures):
        return [], booked, set(ALL_SLOTS)

    closed = {slot for slot in closures if slot}
    free = [s for s in ALL_SLOTS if s not in booked and s not in closed]
    return free, booked, closed


def get_available_slots(store, day, fallback=RAISE):
    """Ascending list of free slot ids for `day`.

    `fallback` decides the answer when the store is unreachable.
    """
    _check_policy(fallback)
    try:
        free, _, _ = _resolve(store, day)
    except StorageUnavailable as exc:
        if fallback == RAISE:
            raise
        logger.warning(
            "Availability lookup for %s failed (%s); reporting %s",
            day, exc.detail, fallback,
        )
        return list(ALL_SLOTS) if fallback == OPTIMISTIC else []
    return free


def get_slot_board(store, day, fallback=RAISE):
    """All 24 slots for the booking grid, with availability and pricing."""
    _check_policy(fallback)
    degraded = False
    try:
        free, booked, closed = _resolve(store, day)
        prices = store.slot_prices(ALL_SLOTS)
    except StorageUnavailable as exc:
        if fallback == RAISE:
            raise
        logger.warning(
            "Slot board for %s failed (%s); reporting %s",
            day, exc.detail, fallback,
        )
        degraded = True
        free = list(ALL_SLOTS) if fallback == OPTIMISTIC else []
        booked, closed, prices = set(), set(), {}

    free = set(free)
    board = []
    for slot in ALL_SLOTS:
        price, prime = prices.get(slot, (0, False))
        board.append({
            "id": slot,
            "time": slot,
            "is_available": slot in free,
            "booked": slot in booked,
            "closed": slot in closed,
            "price": price,
            "is_prime_time": prime,
        })
    return board, degraded
